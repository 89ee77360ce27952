from .cache_path import ParsedPath, UnrecognizedPathFormat, parse_cache_path
from .maven_utils import ScmNotFound
from .resolver import RESOLUTION_ERRORS, Resolution, describe_artifact, resolve, resolve_source_url
from .scm_utils import UnsupportedScmHost, normalize_scm_url

__all__ = [
    "ParsedPath",
    "RESOLUTION_ERRORS",
    "Resolution",
    "ScmNotFound",
    "UnrecognizedPathFormat",
    "UnsupportedScmHost",
    "describe_artifact",
    "normalize_scm_url",
    "parse_cache_path",
    "resolve",
    "resolve_source_url",
]
