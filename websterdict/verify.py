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


import json

from websterdict.util import CancelableThread, EDITIONS
from websterdict.lookup import lookup_candidates
from websterdict.markup import ALLOWED_TAGS
from websterdict.replacer import doc_foreign_tags

class ReportError(ValueError): pass

class JsonlReport(object):
    """ Tally of an output file: entries per edition and markup defects. """
    def __init__(self):
        self.counts = {e: 0 for e in EDITIONS}
        self.foreign = []

    def add(self, data, lineno):
        if data.get("edition") in self.counts:
            self.counts[data["edition"]] += 1
        tags = doc_foreign_tags(data.get("entryText", ""), ALLOWED_TAGS)
        if len(tags) > 0:
            self.foreign.append((lineno, data.get("lookupKey", ""), tags))

def count_jsonl_by_edition(path, audit=True):
    report = JsonlReport()
    with open(path, "r", encoding="utf-8") as f:
        for lineno, line in enumerate(f, 1):
            line = line.strip()
            if line == "": continue
            try: data = json.loads(line)
            except ValueError as e:
                raise ReportError("{}:{}: invalid JSON ({})".format(path, lineno, e))
            if not isinstance(data, dict):
                raise ReportError("{}:{}: not a JSON object".format(path, lineno))
            if audit: report.add(data, lineno)
            elif data.get("edition") in report.counts:
                report.counts[data["edition"]] += 1
    return report

def found(by_edition, edition):
    result = by_edition.get(edition)
    if not isinstance(result, dict): return False
    entries = result.get("entries")
    return isinstance(entries, list) and len(entries) > 0

class LiveChecker(CancelableThread):
    """ Looks up sample terms on the remote query service, one by one. """
    def __init__(self, url, samples, token=None):
        super(LiveChecker, self).__init__()
        self.url = url
        self.samples = samples
        self.token = token
        self.results = []

    def progress(self):
        return "Checking samples... {} of {}".format(len(self.results), len(self.samples))

    def query_term(self, term):
        headers = {}
        if self.token: headers["Authorization"] = "Bearer %s" % self.token
        return self.download_retry(self.url, {"term": term}, headers=headers)

    def check(self, term):
        result = {
            "term": term,
            "candidates": ", ".join(lookup_candidates(term)),
            "error": None,
        }
        try:
            res = self.query_term(term) or {}
            by_edition = res.get("byEdition") or {}
        except Exception as e:
            by_edition = {}
            result["error"] = str(e)
        for edition in EDITIONS:
            result["found%s" % edition] = found(by_edition, edition)
        return result

    def do_run(self):
        for term in self.samples:
            if self._canceled: break
            self.results.append(self.check(term))
