import os
from dotenv import load_dotenv

load_dotenv()

MAVEN_REPO_BASE = os.getenv("MAVEN_REPO_BASE", "https://repo1.maven.org/maven2").rstrip("/")
GITHUB_API_BASE = os.getenv("GITHUB_API_BASE", "https://api.github.com").rstrip("/")
GITHUB_WEB_BASE = "https://github.com"

USER_AGENT = "dependency-git-repo/1.0"

# Timeouts in seconds; the connect timeout is shared, read timeouts are per call type
CONNECT_TIMEOUT = 10
POM_TIMEOUT = 15
API_TIMEOUT = 10
PROBE_TIMEOUT = 5

MAX_PARENT_DEPTH = 6

LOG_DIR = "logs"

# Directory segments that mark where coordinates start in a cache path
GRADLE_CACHE_MARKER = "files-2.1"
MAVEN_REPO_MARKER = "repository"

# Source roots probed through the GitHub contents API for compiled entries
SOURCE_ROOTS = [
    "{artifact}/src/main/java",
    "src/main/java",
    "{artifact}/src/main/kotlin",
    "src/main/kotlin",
    "{artifact}/src",
    "src",
]

# Roots for plain resources; an empty string is the repository root
RESOURCE_ROOTS = [
    "{artifact}/src/main/resources",
    "{module}/src/main/resources",
    "src/main/resources",
    "{artifact}",
    "",
]

# Roots tried by the web probe for compiled entries
PROBE_SOURCE_ROOTS = [
    "{artifact}/src/main/java",
    "{module}/src/main/java",
    "src/main/java",
]

DEFAULT_SOURCE_ROOT = "src/main/java"
DEFAULT_RESOURCE_ROOT = "src/main/resources"

DEFAULT_EXAMPLE = os.path.join(
    os.path.expanduser("~"),
    ".gradle/caches/modules-2/files-2.1/com.fasterxml/classmate/1.7.0/xxxx/"
    "classmate-1.7.0.jar!/com/fasterxml/classmate/AnnotationInclusion.class",
)


def github_token():
    """Returns the GitHub token from the environment, or None when unset or blank."""
    token = os.getenv("GITHUB_TOKEN", "").strip()
    return token or None
