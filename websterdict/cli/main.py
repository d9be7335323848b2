# This file is part of websterdict
# Copyright (C) 2018  Thomas Vogt
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.


import os
import sys
import glob
import json
import signal
import argparse

from websterdict.util import load_plugin, selected_editions, mkdir_p, warn_nl, \
    EDITIONS, ENV_QUERY_URL, ENV_AUTH_TOKEN, DEFAULT_SOURCE_ROOT, DEFAULT_OUTPUT_DIR, \
    DEFAULT_DB, DEFAULT_SAMPLES
from websterdict.queue import JsonlWriterQueue
from websterdict.store import DictionaryStore, StoreImportError
from websterdict.resolver import lookup_edition
from websterdict.verify import count_jsonl_by_edition, LiveChecker, ReportError

last_broadcast_msg = " "
def broadcast(msg, overwrite=False):
    global last_broadcast_msg
    if overwrite:
        sys.stdout.write("\r{}".format(" "*len(last_broadcast_msg.strip())))
        msg = "\r"+msg
    else:
        if last_broadcast_msg[0] == "\r":
            msg = "\n"+msg
        msg += "\n"
    last_broadcast_msg = msg
    sys.stdout.write(msg)
    sys.stdout.flush()

def print_table(rows, columns):
    widths = [max([len(c)] + [len(str(r[c])) for r in rows]) for c in columns]
    line = "  ".join("{:<%d}" % w for w in widths)
    broadcast(line.format(*columns))
    broadcast(line.format(*["-"*w for w in widths]))
    for r in rows:
        broadcast(line.format(*[str(r[c]) for c in columns]))

def wait_for(threads):
    """ Show progress until all threads quit; Ctrl-C cancels them. """
    def ctrl_c(signal, frame):
        broadcast("User interrupt. Stopping...")
        for t in threads: t.cancel()
    try: previous = signal.signal(signal.SIGINT, ctrl_c)
    except ValueError: previous = None
    try:
        while any(t.is_alive() for t in threads):
            for t in threads:
                if t.is_alive():
                    broadcast(t.progress(), True)
                    t.join(1)
                    break
    finally:
        if previous is not None: signal.signal(signal.SIGINT, previous)

def parse_batch_size(value, fallback=100):
    try: value = int(value)
    except (TypeError, ValueError): return fallback
    return value if value > 0 else fallback

def input_files(path):
    path = os.path.abspath(path)
    if os.path.isfile(path): return [path]
    if not os.path.isdir(path):
        raise IOError("Input not found: {}".format(path))
    files = sorted(glob.glob(os.path.join(path, "*.jsonl")))
    if len(files) == 0:
        raise IOError("No .jsonl files found in {}".format(path))
    return files

def cmd_build(args):
    try: editions = selected_editions(args.edition)
    except ValueError as e: sys.exit(str(e))

    plugins = [load_plugin(e, args.source_root) for e in editions]
    missing = []
    for p in plugins:
        missing.extend(p.missing_sources())
    if len(missing) > 0:
        sys.exit("Missing source file(s):\n  " + "\n  ".join(missing))

    outfile = os.path.join(args.output_dir, "dictionary-{}.jsonl".format(args.edition))
    partfile = outfile + ".part"
    try:
        mkdir_p(args.output_dir)
        stream = open(partfile, "w", encoding="utf-8")
    except OSError as e:
        sys.exit("Cannot write to '{}': {}".format(args.output_dir, e))

    writer = JsonlWriterQueue(stream)
    writer.start()
    for p in plugins:
        p.writer = writer
        broadcast("Running plugin '{}' ({}).".format(p.edition, p.dictname))
        p.start()
    wait_for(plugins)
    writer.cancel()
    writer.join()
    stream.close()

    errors = ["{}: {}".format(p.edition, p.error) for p in plugins if p.error is not None]
    if writer.error is not None:
        errors.append("writer: {}".format(writer.error))
    if any(p._canceled for p in plugins) and len(errors) == 0:
        errors.append("interrupted")
    if len(errors) > 0:
        os.remove(partfile)
        sys.exit("Build failed, no output written:\n  " + "\n  ".join(errors))
    os.replace(partfile, outfile)

    broadcast("Wrote {}".format(outfile))
    print_table([p.stats() for p in plugins],
                ["edition", "entries", "dropped", "orphans", "skipped"])
    return 0

def cmd_import(args):
    batch_size = parse_batch_size(args.batch_size)
    try: files = input_files(args.input)
    except IOError as e: sys.exit(str(e))
    store = DictionaryStore(args.db)
    total_inserted = total_updated = 0
    for path in files:
        broadcast("Importing {}".format(path))
        progress = {"rows": 0}
        def on_batch(n):
            progress["rows"] += n
            broadcast("{} imported {} rows".format(os.path.basename(path), progress["rows"]), True)
        try: inserted, updated = store.import_jsonl(path, batch_size, on_batch)
        except (StoreImportError, OSError) as e: sys.exit(str(e))
        total_inserted += inserted
        total_updated += updated
        broadcast("Finished {} ({} inserted, {} updated)".format(
            os.path.basename(path), inserted, updated))
    broadcast("Imported {} rows ({} inserted, {} updated)".format(
        total_inserted + total_updated, total_inserted, total_updated))
    return 0

def cmd_lookup(args):
    if not os.path.isfile(args.db):
        sys.exit("Database not found: {}".format(args.db))
    store = DictionaryStore(args.db)
    editions = selected_editions(args.edition)
    if args.json:
        out = {e: lookup_edition(store, e, args.term) for e in editions}
        sys.stdout.write(json.dumps(out, ensure_ascii=False, indent=2) + "\n")
        return 0
    for edition in editions:
        res = lookup_edition(store, edition, args.term)
        if res["result"] is None:
            broadcast("[{}] no match for '{}' (tried: {})".format(
                edition, args.term, ", ".join(res["candidates"])))
            continue
        result = res["result"]
        broadcast("[{}] {} ({} entries)".format(
            edition, result["matchedKey"], len(result["entries"])))
        for entry in result["entries"]:
            heading = " ({})".format(entry["heading"]) if entry["heading"] else ""
            broadcast("  {}{}: {}".format(entry["word"], heading, entry["entryText"]))
    return 0

def cmd_verify(args):
    path = os.path.abspath(args.input)
    if not os.path.isfile(path):
        sys.exit("Input JSONL not found: {}".format(path))

    try: report = count_jsonl_by_edition(path, audit=not args.no_audit)
    except ReportError as e: sys.exit(str(e))
    broadcast("Verified JSONL counts from {}".format(path))
    print_table([dict(edition=e, entries=n) for e, n in sorted(report.counts.items())],
                ["edition", "entries"])
    if len(report.foreign) > 0:
        warn_nl("{} entries contain markup outside the allowlist:".format(len(report.foreign)))
        for lineno, key, tags in report.foreign[:20]:
            warn_nl("  line {} ({}): {}".format(lineno, key, ", ".join(tags)))

    url = os.environ.get(ENV_QUERY_URL, "").strip()
    if url == "":
        broadcast("Skipping live checks ({} is not set).".format(ENV_QUERY_URL))
        return 0

    samples = [s.strip() for s in args.samples.split(",") if s.strip() != ""]
    checker = LiveChecker(url, samples, os.environ.get(ENV_AUTH_TOKEN) or None)
    checker.start()
    wait_for([checker])
    broadcast("Sample lookup verification:")
    print_table(checker.results,
                ["term", "candidates"] + ["found%s" % e for e in EDITIONS] + ["error"])
    return 0

def cmd_export(args):
    if not os.path.isfile(args.db):
        sys.exit("Database not found: {}".format(args.db))
    store = DictionaryStore(args.db)
    for edition in selected_editions(args.edition):
        plugin = load_plugin(edition)
        fname = os.path.join(args.output_dir, "webster{}".format(edition), "stardict.ifo")
        broadcast("Exporting edition {} to '{}'.".format(edition, fname))
        no = store.export(edition, fname, plugin.dictname)
        broadcast("Wrote {} articles.".format(no))
    return 0

def build_parser():
    parser = argparse.ArgumentParser(
        description='Convert legacy Webster dictionary dumps into lookup-ready entries.')
    sub = parser.add_subparsers(dest="command", metavar="COMMAND")
    sub.required = True
    edition_choices = list(EDITIONS) + ["all"]

    p = sub.add_parser("build", help="Parse the SQL dumps into a JSONL file.")
    p.add_argument('--source-root', action="store", default=DEFAULT_SOURCE_ROOT, type=str,
                    help=("Directory holding the dictionary_webster*.sql dumps."))
    p.add_argument('--output-dir', action="store", default=DEFAULT_OUTPUT_DIR, type=str,
                    help=("Directory for dictionary-<edition>.jsonl."))
    p.add_argument('--edition', action="store", default="all", choices=edition_choices,
                    help=("Edition to convert."))
    p.set_defaults(func=cmd_build)

    p = sub.add_parser("import", help="Upsert JSONL entries into the database.")
    p.add_argument('--input', action="store", default=DEFAULT_OUTPUT_DIR, type=str,
                    help=("A .jsonl file or a directory of them."))
    p.add_argument('--db', action="store", default=DEFAULT_DB, type=str,
                    help=("sqlite database file."))
    p.add_argument('--batch-size', action="store", default="100", type=str,
                    help=("Entries per transaction."))
    p.set_defaults(func=cmd_import)

    p = sub.add_parser("lookup", help="Resolve a term against the database.")
    p.add_argument('term', metavar='TERM', type=str, help='The term to look up.')
    p.add_argument('--edition', action="store", default="all", choices=edition_choices)
    p.add_argument('--db', action="store", default=DEFAULT_DB, type=str)
    p.add_argument('--json', action="store_true", default=False,
                    help=("Print the raw lookup result."))
    p.set_defaults(func=cmd_lookup)

    p = sub.add_parser("verify", help="Tally a JSONL file and check the live service.")
    p.add_argument('--input', action="store",
                    default=os.path.join(DEFAULT_OUTPUT_DIR, "dictionary-all.jsonl"), type=str)
    p.add_argument('--samples', action="store", default=DEFAULT_SAMPLES, type=str,
                    help=("Comma-separated sample terms for live checks."))
    p.add_argument('--no-audit', action="store_true", default=False,
                    help=("Skip the markup allowlist audit."))
    p.set_defaults(func=cmd_verify)

    p = sub.add_parser("export", help="Write StarDict glossaries from the database.")
    p.add_argument('--edition', action="store", default="all", choices=edition_choices)
    p.add_argument('--db', action="store", default=DEFAULT_DB, type=str)
    p.add_argument('-o', '--output-dir', action="store", default="stardict", type=str)
    p.set_defaults(func=cmd_export)
    return parser

def cli_main(argv=None):
    args = build_parser().parse_args(argv)
    return args.func(args)
