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

from websterdict.util import CancelableThread

class BasePlugin(CancelableThread):
    """
    Ingests one edition. Subclasses name their dump files in `sources`
    (role -> file name) and build their stages in setup(); the stages run
    one after another, so a later stage may rely on the data collected by
    an earlier one.
    """
    edition = ""
    dictname = ""
    sources = {}
    optional_sources = ()

    stages = None
    curr_stage = None
    source_root = ""
    writer = None

    def __init__(self, source_root):
        super(BasePlugin, self).__init__()
        self.source_root = source_root
        self.stages = []
        self.count = 0
        self.dropped = 0
        self.orphans = 0

    def source_path(self, role):
        return os.path.join(self.source_root, self.sources[role])

    def missing_sources(self):
        return [
            self.source_path(role) for role in sorted(self.sources)
            if role not in self.optional_sources
            and not os.path.isfile(self.source_path(role))
        ]

    def has_source(self, role):
        return os.path.isfile(self.source_path(role))

    def setup(self): pass

    def append(self, entry):
        if entry.lookup_key == "" or entry.entry_text == "":
            self.dropped += 1
            return
        self.count += 1
        if self.writer is not None:
            self.writer.put(entry)

    def skipped_statements(self):
        return sum(s.parser.skipped + s.parser.incomplete for s in self.stages)

    def stats(self):
        return {
            "edition": self.edition,
            "entries": self.count,
            "dropped": self.dropped,
            "orphans": self.orphans,
            "skipped": self.skipped_statements(),
        }

    def progress(self):
        if self.curr_stage == None: return "{}: Setup...".format(self.edition)
        return "{}: {}".format(self.edition, self.curr_stage.progress())

    def do_run(self):
        self.setup()
        for s in self.stages:
            self.curr_stage = s
            s.start()
            s.join()
            if s.error is not None: raise s.error
            if self._canceled: break

    def cancel(self):
        CancelableThread.cancel(self)
        if self.curr_stage: self.curr_stage.cancel()
