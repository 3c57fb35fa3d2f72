from concurrent.futures import ThreadPoolExecutor

import pytest

from faultline.core.classify import critical
from faultline.core.classify import debug
from faultline.core.classify import error
from faultline.core.classify import info
from faultline.core.classify import tag_as_level
from faultline.core.classify import tagging
from faultline.core.classify import trace
from faultline.core.classify import try_get_level
from faultline.core.classify import warning
from faultline.core.data import LEVEL_KEY
from faultline.core.data import add_log_data
from faultline.core.data import get_log_data
from faultline.core.levels import Level


@pytest.mark.unit
class TestTagAsLevel:
    def test_untagged_error_has_no_level(self):
        with pytest.raises(ValueError) as excinfo:
            raise ValueError("FAIL")
        assert try_get_level(excinfo.value) is None

    @pytest.mark.parametrize("level", list(Level))
    def test_tag_round_trip(self, level):
        exc = ValueError("FAIL")
        assert tag_as_level(exc, level) is exc
        assert try_get_level(exc) is level

    def test_override_replaces_existing_level(self):
        exc = tag_as_level(ValueError("FAIL"), Level.DEBUG)
        tag_as_level(exc, Level.ERROR)
        assert try_get_level(exc) is Level.ERROR

    def test_no_override_keeps_existing_level(self):
        exc = tag_as_level(ValueError("FAIL"), Level.DEBUG)
        tag_as_level(exc, Level.CRITICAL, override=False)
        assert try_get_level(exc) is Level.DEBUG

    def test_no_override_sets_missing_level(self):
        exc = tag_as_level(ValueError("FAIL"), Level.INFO, override=False)
        assert try_get_level(exc) is Level.INFO

    def test_no_override_replaces_malformed_level(self):
        exc = ValueError("FAIL")
        vars(exc)["__error_data__"] = {LEVEL_KEY: "LOUD"}
        tag_as_level(exc, Level.WARNING, override=False)
        assert try_get_level(exc) is Level.WARNING

    def test_stored_as_member_name(self):
        exc = warning(ValueError("FAIL"))
        assert get_log_data(exc)[LEVEL_KEY] == "WARNING"

    def test_custom_data_is_preserved(self):
        exc = critical(add_log_data(ValueError("FAIL"), "User Id", "7"))
        assert get_log_data(exc)["User Id"] == "7"

    def test_single_tag_per_error(self):
        exc = info(debug(ValueError("FAIL")))
        data = get_log_data(exc)
        assert list(data) == [LEVEL_KEY]
        assert data[LEVEL_KEY] == "INFO"


@pytest.mark.unit
class TestTryGetLevel:
    @pytest.mark.parametrize("stored", ["LOUD", "", "7", None, 3, object()])
    def test_malformed_value_reads_as_absent(self, stored):
        exc = ValueError("FAIL")
        vars(exc)["__error_data__"] = {LEVEL_KEY: stored}
        assert try_get_level(exc) is None

    def test_lowercase_value_is_accepted(self):
        exc = ValueError("FAIL")
        vars(exc)["__error_data__"] = {LEVEL_KEY: "warning"}
        assert try_get_level(exc) is Level.WARNING

    def test_plain_level_key_is_ignored(self):
        exc = add_log_data(ValueError("FAIL"), "Level", "CRITICAL")
        assert try_get_level(exc) is None


@pytest.mark.unit
class TestShortcuts:
    @pytest.mark.parametrize(
        "shortcut, level",
        [
            (trace, Level.TRACE),
            (debug, Level.DEBUG),
            (info, Level.INFO),
            (warning, Level.WARNING),
            (error, Level.ERROR),
            (critical, Level.CRITICAL),
        ],
    )
    def test_shortcut(self, shortcut, level):
        exc = KeyError("sku")
        assert shortcut(exc) is exc
        assert try_get_level(exc) is level

    @pytest.mark.parametrize("shortcut", [trace, debug, info, error])
    def test_shortcut_without_override(self, shortcut):
        exc = shortcut(warning(KeyError("sku")), override=False)
        assert try_get_level(exc) is Level.WARNING

    def test_fluent_raise(self):
        with pytest.raises(TimeoutError) as excinfo:
            raise warning(TimeoutError("upstream is slow"))
        assert try_get_level(excinfo.value) is Level.WARNING


@pytest.mark.unit
class TestRetagging:
    def test_caught_and_rethrown(self):
        with pytest.raises(ValueError) as excinfo:
            try:
                raise ValueError("FAIL")
            except ValueError as exc:
                warning(exc)
                raise
        assert try_get_level(excinfo.value) is Level.WARNING

    def test_last_explicit_tag_wins(self):
        with pytest.raises(ValueError) as excinfo:
            try:
                raise debug(ValueError("FAIL"))
            except ValueError as exc:
                info(exc)
                raise
        assert try_get_level(excinfo.value) is Level.INFO

    def test_tagging_context_manager(self):
        with pytest.raises(ValueError) as excinfo:
            with tagging(Level.INFO):
                raise debug(ValueError("FAIL"))
        assert try_get_level(excinfo.value) is Level.INFO

    def test_tagging_context_manager_without_override(self):
        with pytest.raises(ValueError) as excinfo:
            with tagging(Level.INFO, override=False):
                raise debug(ValueError("FAIL"))
        assert try_get_level(excinfo.value) is Level.DEBUG

    def test_tagging_context_manager_without_error(self):
        with tagging(Level.ERROR):
            value = 42
        assert value == 42


@pytest.mark.unit
class TestGroups:
    def test_group_and_member_tags_are_independent(self):
        member = ValueError("member")
        group = ExceptionGroup("group", [member])
        warning(member)
        assert try_get_level(group) is None
        critical(group)
        assert try_get_level(member) is Level.WARNING
        assert try_get_level(group) is Level.CRITICAL


@pytest.mark.slow
def test_concurrent_non_overriding_writes_agree():
    exc = ValueError("FAIL")
    levels = list(Level)

    def worker(index):
        tag_as_level(exc, levels[index % len(levels)], override=False)
        return try_get_level(exc)

    with ThreadPoolExecutor(max_workers=8) as executor:
        results = set(executor.map(worker, range(64)))
    assert len(results) == 1
    assert results == {try_get_level(exc)}
