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


from websterdict.util import CancelableThread, warn_nl
from websterdict.sqldump import DumpParser

class Processor(CancelableThread):
    """ Streams the rows of one dump file through process_row(). """
    plugin = None
    path = ""
    label = ""
    parser = None

    _i = 0

    def __init__(self, plugin, path, label=""):
        super(Processor, self).__init__()
        self.plugin = plugin
        self.path = path
        self.label = label
        self.parser = DumpParser(on_skip=self.on_skip)

    def progress(self):
        if self._canceled: return "Sleeping..."
        return "{}... {} rows".format(self.label or "Processing", self._i)

    def on_skip(self, lineno, reason):
        warn_nl("{}:{}: skipped statement ({})".format(self.path, lineno, reason))

    def do_run(self):
        rows = self.parser.parse_file(self.path)
        try:
            for row in rows:
                if self._canceled: break
                self.process_row(row)
                self._i += 1
        finally:
            # releases the dump file when the loop is left early
            rows.close()

    def process_row(self, row): pass

class EntryProcessor(Processor):
    """ Each row maps to zero or more entries, handed to the plugin. """
    def __init__(self, plugin, path, mapper, label=""):
        super(EntryProcessor, self).__init__(plugin, path, label)
        self.mapper = mapper

    def process_row(self, row):
        entries = self.mapper(row)
        if len(entries) == 0:
            self.plugin.dropped += 1
            return
        for entry in entries:
            self.plugin.append(entry)

class CollectorProcessor(Processor):
    """ Folds the rows of a lookup table into a dict keyed by the caller. """
    data = None

    def __init__(self, plugin, path, collect, label=""):
        super(CollectorProcessor, self).__init__(plugin, path, label)
        self.collect = collect
        self.data = {}

    def process_row(self, row):
        self.collect(self.data, row)
