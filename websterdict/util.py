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


import sys
import os
import errno
import time
import random
import json
import unicodedata

import urllib.request
import urllib.parse
from urllib.error import URLError, HTTPError
import http.client

import pkgutil
import importlib

import threading

import websterdict.plugins
pth = websterdict.plugins.__path__
PLUGINS = [name for _,name,_ in pkgutil.iter_modules(pth)]

EDITIONS = ("1828", "1844", "1913")

ENV_QUERY_URL = "WEBSTERDICT_QUERY_URL"
ENV_AUTH_TOKEN = "WEBSTERDICT_AUTH_TOKEN"

DEFAULT_SOURCE_ROOT = os.path.join("data", "dictionary", "sql")
DEFAULT_OUTPUT_DIR = os.path.join("data", "dictionary", "normalized")
DEFAULT_DB = os.path.join("data", "dictionary", "dictionary.sqlite")
DEFAULT_SAMPLES = "abandon,charity,zeal,blessings,heavens"

URL_HEADER = {
    "User-Agent": "websterdict/0.1",
    "Accept": "application/json",
}

MAX_RETRIES = 3

def warn_nl(msg):
    sys.stdout.write("\r\n{}\n".format(msg))
    sys.stdout.flush()

def mkdir_p(path):
    try: os.makedirs(path)
    except OSError as exc:
        if exc.errno == errno.EEXIST and os.path.isdir(path): pass
        else: raise

def selected_editions(edition):
    if edition == "all": return list(EDITIONS)
    if edition not in EDITIONS:
        raise ValueError("Unknown edition '{}'.".format(edition))
    return [edition]

def load_plugin(edition, source_root=""):
    """ Instantiate the plugin thread that ingests one edition. """
    plugin_name = "webster%s" % edition
    if plugin_name not in PLUGINS:
        return None
    plugin_module = importlib.import_module("websterdict.plugins.%s" % plugin_name)
    return plugin_module.Plugin(source_root)

def remove_accents(input_str):
    if isinstance(input_str, bytes):
        input_str = input_str.decode("utf-8")
    nfkd_form = unicodedata.normalize('NFKD', input_str)
    return u"".join([c for c in nfkd_form if not unicodedata.combining(c)])

def text_value(value):
    """ Column value as stripped text, None becomes "". """
    if value is None: return ""
    return str(value).strip()

def number_value(value):
    """ Column value if it is numeric (bool excluded), else None. """
    if isinstance(value, bool): return None
    if isinstance(value, (int, float)): return value
    return None

"""
The CancelableThread is a convenience class that all threads in websterdict
are instances of. Apart from the cancel() method it records the exception
that ended run() (if any) and provides a bounded JSON download method.
"""
class CancelableThread(threading.Thread):
    _canceled = False
    error = None

    def __init__(self):
        super(CancelableThread, self).__init__()
        self.daemon = True

    def progress(self):
        if self._canceled: return "Sleeping..."
        return "Active..."

    def cancel(self): self._canceled = True

    def run(self):
        try: self.do_run()
        except Exception as e:
            self.error = e
            self._canceled = True

    def do_run(self): pass

    def download_retry(self, url, params=None, headers=None, retries=MAX_RETRIES):
        if self._canceled: return None
        header = dict(URL_HEADER)
        if headers is not None: header.update(headers)
        if params is not None:
            url = "%s%s%s" % (url, "&" if "?" in url else "?",
                              urllib.parse.urlencode(params))
        req = urllib.request.Request(url, headers=header)
        try:
            with urllib.request.urlopen(req, timeout=60) as response:
                return json.loads(response.read().decode("utf-8"))
        except HTTPError as e:
            if e.code in [401,403,404] or retries <= 1: raise
            warn_nl("Error on %s: HTTP %d. Retrying..." % (url, e.code))
        except (URLError, http.client.HTTPException, OSError):
            if retries <= 1: raise
            warn_nl("Connection to %s failed. Retrying..." % url)
        time.sleep(random.uniform(1.0,3.0))
        return self.download_retry(url, None, headers, retries - 1)
