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
import queue

from websterdict.util import CancelableThread

class QueueThread(CancelableThread):
    _queue = None

    def __init__(self):
        super(QueueThread, self).__init__()
        self._queue = queue.Queue()

    def process_item(self, item): return None
    def put(self, item): self._queue.put(item)

    def progress(self):
        return "Digesting queue... {}.".format(self._queue.qsize())

    def do_run(self):
        # cancel() means "no more items": drain, then stop
        while True:
            try: item = self._queue.get(timeout=1)
            except queue.Empty:
                if self._canceled: break
                else: continue
            self.process_item(item)
            self._queue.task_done()

class JsonlWriterQueue(QueueThread):
    """ One JSON object per line, fed by any number of plugin threads. """
    written = 0

    def __init__(self, stream):
        super(JsonlWriterQueue, self).__init__()
        self.stream = stream

    def process_item(self, entry):
        self.stream.write(json.dumps(entry.to_json(), ensure_ascii=False))
        self.stream.write("\n")
        self.written += 1

    def progress(self):
        return "Writing entries... {} ({} queued).".format(
            self.written, self._queue.qsize()
        )
