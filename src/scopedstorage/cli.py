"""scopedstorage

Usage:
    scopedstorage [options] get <key> [--scope=<scope>] [--default=<value>]
    scopedstorage [options] set <key> <value> [--scope=<scope>]
    scopedstorage [options] remove <key> [--scope=<scope>]
    scopedstorage [options] swap <key> <a> <b> [--scope=<scope>] [--default=<value>]
    scopedstorage [options] list [--scope=<scope>]
    scopedstorage [options] path [--scope=<scope>]
    scopedstorage [options] clear
    scopedstorage (-h | --help)
    scopedstorage --version

Options:
    -h --help           show this screen.
    --version           show version.
    -c <file>           read settings from a JSON config file.
    -w <dir>            path of the open workspace.
    -u <uid>            unique id of the open workspace.
    --home=<dir>        settings directory.
    --scope=<scope>     global or workspace [default: global]
    --default=<value>   value to use when the key is absent.
    -v                  verbose logging.
"""

from docopt import docopt

from scopedstorage import __version__
from .backing import JsonFileStore
from .config import Environment, Settings, conf_get, create_config, read_config
from .scope import Scope
from .sinks import LogSink
from .storage import ScopedStorage
from .util import log
from .workspace import Workspace

version = __version__


def _parse_uid(raw):
    if raw is None:
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise ValueError(f"Workspace uid must be an integer, got {raw!r}") from None


def create_storage(conf) -> ScopedStorage:
    environment = Environment.from_config(conf)
    global_store = JsonFileStore(environment.resolve(conf_get(conf, Settings.STORE_FILE)))
    workspace_store_file = conf_get(conf, Settings.WORKSPACE_STORE_FILE)
    workspace_store = JsonFileStore(environment.resolve(workspace_store_file)) if workspace_store_file else None

    workspace = None
    workspace_path = conf_get(conf, Settings.WORKSPACE)
    if workspace_path:
        workspace = Workspace.from_path(workspace_path, uid=_parse_uid(conf_get(conf, Settings.WORKSPACE_UID)))

    return ScopedStorage(global_store, workspace_store, workspace=workspace, environment=environment)


def _cli_settings(arguments) -> dict:
    return {
        Settings.APP_SETTINGS_HOME.key: arguments.get("--home"),
        Settings.WORKSPACE.key: arguments.get("-w"),
        Settings.WORKSPACE_UID.key: arguments.get("-u"),
        Settings.LOG_LEVEL.key: "DEBUG" if arguments.get("-v") else None,
    }


def execute(storage: ScopedStorage, arguments) -> int:
    scope = Scope.parse(arguments.get("--scope") or Scope.GLOBAL)
    key = arguments.get("<key>")

    if arguments.get("get"):
        value = storage.get(key, scope, arguments.get("--default"))
        if value is None:
            log.error(f"{key} not found in {scope.value} scope")
            return 1
        print(value)
    elif arguments.get("set"):
        storage.store(key, arguments.get("<value>"), scope)
    elif arguments.get("remove"):
        storage.remove(key, scope)
    elif arguments.get("swap"):
        storage.swap(key, arguments.get("<a>"), arguments.get("<b>"), scope, arguments.get("--default"))
        print(storage.get(key, scope))
    elif arguments.get("list"):
        for k in storage.keys(scope):
            print(f"{k}={storage.get(k, scope)}")
    elif arguments.get("path"):
        path = storage.get_storage_path(scope)
        if path is None:
            log.error(f"No storage path for {scope.value} scope")
            return 1
        print(path)
    elif arguments.get("clear"):
        storage.clear()
        log.info("Cleared all storage")
    return 0


def run(argv=None) -> int:
    arguments = docopt(__doc__, argv=argv, version=f"scopedstorage {version}")
    sink = LogSink().install()
    try:
        file_conf = read_config(arguments["-c"]) if arguments.get("-c") else {}
        conf = create_config(_cli_settings(arguments), file_conf)
        log.set_default_level(conf_get(conf, Settings.LOG_LEVEL))
        storage = create_storage(conf)
        return execute(storage, arguments)
    except (OSError, ValueError) as e:
        log.error(f"[red]{e}[/red]")
        return 1
    finally:
        sink.close()


def run_scopedstorage():
    raise SystemExit(run())


if __name__ == "__main__":
    run_scopedstorage()
