from depgitrepo.http_client import ProbeStatus
from depgitrepo.probe_utils import last_resort_url, probe, root_candidates

REPO = "https://gitlab.com/acme/widgets"


class FakeProbeClient:
    """Answers EXISTS for a fixed set of URLs and records every probe."""

    def __init__(self, existing=(), errors=()):
        self.existing = set(existing)
        self.errors = set(errors)
        self.probed = []

    def exists(self, url, *, timeout=5, headers=None):
        self.probed.append(url)
        if url in self.errors:
            return ProbeStatus.ERROR
        return ProbeStatus.EXISTS if url in self.existing else ProbeStatus.ABSENT


def test_root_candidates_for_compiled_entries():
    assert root_candidates("core", "com/acme/Foo.java", True) == [
        "core/src/main/java", "acme/src/main/java", "src/main/java"]
    assert root_candidates("core", "acme/Foo.java", True) == ["core/src/main/java", "src/main/java"]


def test_root_candidates_for_resources():
    assert root_candidates("core", "META-INF/foo.xml", False) == [
        "core/src/main/resources", "src/main/resources", "core", ""]


def test_root_candidates_for_empty_target():
    assert root_candidates("core", "", True) == [""]


def test_probe_tries_blob_then_tree_refs_outer_roots_inner():
    client = FakeProbeClient()
    result = probe(client, REPO, ["v1", "1"], ["core/src/main/java", "src/main/java"], "com/acme/Foo.java")
    assert result is None
    assert client.probed == [
        f"{REPO}/blob/v1/core/src/main/java/com/acme/Foo.java",
        f"{REPO}/tree/v1/core/src/main/java/com/acme/Foo.java",
        f"{REPO}/blob/v1/src/main/java/com/acme/Foo.java",
        f"{REPO}/tree/v1/src/main/java/com/acme/Foo.java",
        f"{REPO}/blob/1/core/src/main/java/com/acme/Foo.java",
        f"{REPO}/tree/1/core/src/main/java/com/acme/Foo.java",
        f"{REPO}/blob/1/src/main/java/com/acme/Foo.java",
        f"{REPO}/tree/1/src/main/java/com/acme/Foo.java",
    ]


def test_probe_ref_priority_dominates_root_choice():
    lower_root_first_ref = f"{REPO}/blob/v1/src/main/java/com/acme/Foo.java"
    first_root_second_ref = f"{REPO}/blob/1/core/src/main/java/com/acme/Foo.java"
    client = FakeProbeClient(existing={lower_root_first_ref, first_root_second_ref})
    result = probe(client, REPO, ["v1", "1"], ["core/src/main/java", "src/main/java"], "com/acme/Foo.java")
    assert result == lower_root_first_ref


def test_probe_finds_directory_view_and_skips_errors():
    tree_url = f"{REPO}/tree/v1/src/main/resources/META-INF/services"
    client = FakeProbeClient(existing={tree_url}, errors={f"{REPO}/blob/v1/src/main/resources/META-INF/services"})
    result = probe(client, REPO, ["v1"], ["src/main/resources"], "META-INF/services")
    assert result == tree_url


def test_probe_repository_root_for_empty_target():
    client = FakeProbeClient(existing={f"{REPO}/tree/v1"})
    assert probe(client, REPO, ["v1"], [""], "") == f"{REPO}/tree/v1"


def test_last_resort_url():
    assert last_resort_url(REPO, ["core-1.0", "v1.0"], "1.0", "com/acme/Foo.java", True) == (
        f"{REPO}/blob/core-1.0/src/main/java/com/acme/Foo.java")
    assert last_resort_url(REPO, [], "1.0", "META-INF/foo.xml", False) == (
        f"{REPO}/blob/v1.0/src/main/resources/META-INF/foo.xml")
    assert last_resort_url(REPO, ["v1.0"], "1.0", "", False) == f"{REPO}/tree/v1.0"
