import codecs
import json
import os


def ensure_dir(directory) -> bool:
    """
    Create `directory` and any missing parents.

    Walks up from `directory` to the first path that exists, then creates the
    missing components top-down. Directories that appear in the meantime are
    tolerated. Returns whether `directory` ends up existing as a directory;
    returns False (without creating anything) when an existing ancestor is not
    a directory. Other OS errors (permissions, read-only mounts) propagate.
    """
    directory = os.path.abspath(directory)
    missing = []
    current = directory
    while not os.path.exists(current):
        missing.append(current)
        parent = os.path.dirname(current)
        if parent == current:
            break
        current = parent

    if missing and not os.path.isdir(current):
        return False

    for path in reversed(missing):
        try:
            os.mkdir(path)
        except FileExistsError:
            if not os.path.isdir(path):
                return False

    return os.path.isdir(directory)


def parse_json(filename):
    with codecs.open(filename, 'r', encoding='utf8') as f:
        return json.load(f)


def write_json(filename, data, indent=4):
    with codecs.open(filename, 'w', encoding='utf8') as f:
        json.dump(data, f, indent=indent)


def replace_json(filename, data):
    """Writes `data` next to `filename` and atomically moves it into place."""
    tmp_filename = f"{filename}.tmp"
    try:
        write_json(tmp_filename, data, indent=None)
        os.replace(tmp_filename, filename)
    except OSError:
        if os.path.isfile(tmp_filename):
            os.remove(tmp_filename)
        raise
