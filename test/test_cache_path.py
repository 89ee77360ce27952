import pytest

from depgitrepo.cache_path import (
    ParsedPath,
    UnrecognizedPathFormat,
    expand_roots,
    join_path,
    module_guess,
    parse_cache_path,
    source_target_for,
    to_source_path,
)

GRADLE_CLASSMATE = (
    "/home/dev/.gradle/caches/modules-2/files-2.1/com.fasterxml/classmate/1.7.0/"
    "0a1b2c3d/classmate-1.7.0.jar!/com/fasterxml/classmate/AnnotationInclusion.class"
)


def test_parse_gradle_module_cache_path():
    parsed = parse_cache_path(GRADLE_CLASSMATE)
    assert parsed == ParsedPath(
        "com.fasterxml", "classmate", "1.7.0", "com/fasterxml/classmate/AnnotationInclusion.class"
    )
    assert parsed.gav() == "com.fasterxml:classmate:1.7.0"
    assert parsed.is_compiled_entry


def test_parse_gradle_joins_group_segments_between_marker_and_artifact():
    path = ("/cache/files-2.1/org/apache/commons/commons-lang3/3.12.0/ffee/"
            "commons-lang3-3.12.0.jar!/org/apache/commons/lang3/StringUtils.class")
    parsed = parse_cache_path(path)
    assert parsed.group_id == "org.apache.commons"
    assert parsed.artifact_id == "commons-lang3"
    assert parsed.version == "3.12.0"


def test_parse_gradle_accepts_qualified_versions():
    path = "/c/files-2.1/io.acme/widget/1.7.0-RC1/abc/widget-1.7.0-RC1.jar!/io/acme/Widget.class"
    parsed = parse_cache_path(path)
    assert parsed.version == "1.7.0-RC1"


def test_parse_maven_local_repository_path():
    path = "/home/dev/.m2/repository/org/slf4j/slf4j-api/1.7.36/slf4j-api-1.7.36.jar!/org/slf4j/Logger.class"
    parsed = parse_cache_path(path)
    assert parsed == ParsedPath("org.slf4j", "slf4j-api", "1.7.36", "org/slf4j/Logger.class")


def test_parse_maven_path_with_classifier_and_windows_separators():
    path = ("C:\\Users\\dev\\.m2\\repository\\com\\google\\guava\\guava\\32.1.2-jre\\"
            "guava-32.1.2-jre-tests.jar!/com/google/common/base/Strings.class")
    parsed = parse_cache_path(path)
    assert parsed.group_id == "com.google.guava"
    assert parsed.artifact_id == "guava"
    assert parsed.version == "32.1.2-jre"
    assert parsed.entry_path == "com/google/common/base/Strings.class"


def test_parse_resource_entry_strips_leading_separators():
    path = "/m/.m2/repository/org/acme/core/2.0/core-2.0.jar!//META-INF/services/org.acme.Plugin"
    parsed = parse_cache_path(path)
    assert parsed.entry_path == "META-INF/services/org.acme.Plugin"
    assert not parsed.is_compiled_entry


def test_parse_without_entry_yields_coordinates_only():
    parsed = parse_cache_path("/c/files-2.1/com.fasterxml/classmate/1.7.0/abc/classmate-1.7.0.jar")
    assert parsed.gav() == "com.fasterxml:classmate:1.7.0"
    assert parsed.entry_path == ""
    assert not parsed.has_entry


@pytest.mark.parametrize("path", [
    "",
    "   ",
    "not a path",
    "/tmp/lib/foo.jar!/com/acme/Foo.class",
    # version segment does not start with a digit
    "/c/files-2.1/com.acme/lib/release/abcdef/lib-release.jar!/com/acme/Foo.class",
    # jar name does not match artifact-version
    "/m/.m2/repository/org/acme/core/2.0/other-2.0.jar!/A.class",
    # nothing between the marker and the artifact
    "/m/.m2/repository/core/2.0/core-2.0.jar/x!/A.class",
])
def test_parse_rejects_unrecognized_paths(path):
    with pytest.raises(UnrecognizedPathFormat):
        parse_cache_path(path)


def test_unrecognized_path_format_is_a_value_error():
    assert issubclass(UnrecognizedPathFormat, ValueError)


@pytest.mark.parametrize("entry,expected", [
    ("com/acme/Outer$Inner.class", "com/acme/Outer.java"),
    ("com/acme/Outer$Inner$Deep.class", "com/acme/Outer.java"),
    ("com/acme/Outer$1.class", "com/acme/Outer.java"),
    ("com/acme/Outer.class", "com/acme/Outer.java"),
    ("/com/acme/Outer.class", "com/acme/Outer.java"),
    ("com/a$b/Outer.class", "com/a$b/Outer.java"),
    ("Root.class", "Root.java"),
])
def test_to_source_path(entry, expected):
    assert to_source_path(entry) == expected


def test_to_source_path_rejects_non_class_entries():
    with pytest.raises(ValueError):
        to_source_path("META-INF/foo.xml")


def test_source_target_passes_resources_through():
    assert source_target_for("META-INF/foo.xml") == "META-INF/foo.xml"
    assert source_target_for("com/acme/Outer$Inner.class") == "com/acme/Outer.java"


@pytest.mark.parametrize("target,expected", [
    ("com/acme/Foo.java", "acme"),
    ("a/b/c/file.txt", "c"),
    ("acme/Foo.java", None),
    ("Foo.java", None),
])
def test_module_guess(target, expected):
    assert module_guess(target) == expected


def test_join_path_skips_empty_parts():
    assert join_path("", "META-INF/foo.xml") == "META-INF/foo.xml"
    assert join_path("src/main/java/", "/com/A.java") == "src/main/java/com/A.java"


def test_expand_roots_drops_module_roots_without_guess_and_dedupes():
    templates = ["{artifact}/src", "{module}/src", "src", "src"]
    assert expand_roots(templates, "lib", None) == ["lib/src", "src"]
    assert expand_roots(templates, "lib", "acme") == ["lib/src", "acme/src", "src"]
