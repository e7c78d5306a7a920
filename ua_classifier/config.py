import os
import pathlib

ENV_VAR = "USER_AGENT_PATH"

DEFAULT_PATH = pathlib.Path(__file__).resolve().parent / "assets" / "regexes.yaml"


def rules_path(path: str | os.PathLike[str] | None = None) -> pathlib.Path:
    """Resolve the rule file location.

    An explicit ``path`` wins, then the ``USER_AGENT_PATH`` environment
    variable, then the rules bundled with the package.
    """
    if path is not None:
        return pathlib.Path(path)
    if override := os.environ.get(ENV_VAR):
        return pathlib.Path(override)
    return DEFAULT_PATH
