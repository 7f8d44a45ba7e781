import logging

import pytest

from crumbtrail.severity import ErrorCode, Severity, SeverityTranslator, code_for_warning


class TestSeverityTranslator:
    """Test suite for error-code translation and override maps."""

    def setup_method(self):
        self.translator = SeverityTranslator()

    @pytest.mark.parametrize("code,expected", [
        (ErrorCode.DEPRECATED, Severity.WARNING),
        (ErrorCode.USER_DEPRECATED, Severity.WARNING),
        (ErrorCode.WARNING, Severity.WARNING),
        (ErrorCode.USER_WARNING, Severity.WARNING),
        (ErrorCode.RECOVERABLE_ERROR, Severity.WARNING),
        (ErrorCode.ERROR, Severity.FATAL),
        (ErrorCode.PARSE, Severity.FATAL),
        (ErrorCode.CORE_ERROR, Severity.FATAL),
        (ErrorCode.CORE_WARNING, Severity.FATAL),
        (ErrorCode.COMPILE_ERROR, Severity.FATAL),
        (ErrorCode.COMPILE_WARNING, Severity.FATAL),
        (ErrorCode.USER_ERROR, Severity.ERROR),
        (ErrorCode.NOTICE, Severity.INFO),
        (ErrorCode.USER_NOTICE, Severity.INFO),
        (ErrorCode.STRICT, Severity.INFO),
    ])
    def test_builtin_classification(self, code, expected):
        assert self.translator.translate(code) is expected

    def test_unknown_code_defaults_to_error(self):
        assert self.translator.translate(3) is Severity.ERROR
        assert self.translator.translate(1 << 20) is Severity.ERROR

    def test_plain_int_codes_are_accepted(self):
        assert self.translator.translate(8) is Severity.INFO

    def test_override_wins_over_table(self):
        """A code in the override map uses the map, even if the table knows it."""
        self.translator.register_severity_map({ErrorCode.USER_NOTICE: Severity.DEBUG})

        assert self.translator.translate(ErrorCode.USER_NOTICE) is Severity.DEBUG

    def test_codes_missing_from_override_fall_back_to_table(self):
        self.translator.register_severity_map({ErrorCode.USER_NOTICE: Severity.DEBUG})

        assert self.translator.translate(ErrorCode.PARSE) is Severity.FATAL
        assert self.translator.translate(3) is Severity.ERROR

    def test_override_accepts_string_levels_and_unknown_codes(self):
        self.translator.register_severity_map({3: "info"})

        assert self.translator.translate(3) is Severity.INFO

    def test_register_replaces_wholesale(self):
        self.translator.register_severity_map({ErrorCode.NOTICE: Severity.FATAL})
        self.translator.register_severity_map({ErrorCode.STRICT: Severity.DEBUG})

        assert self.translator.translate(ErrorCode.NOTICE) is Severity.INFO
        assert self.translator.translate(ErrorCode.STRICT) is Severity.DEBUG

    def test_registering_same_map_twice_is_harmless(self):
        mapping = {ErrorCode.WARNING: Severity.ERROR}
        self.translator.register_severity_map(mapping)
        self.translator.register_severity_map(mapping)

        assert self.translator.translate(ErrorCode.WARNING) is Severity.ERROR

    def test_clearing_override_map(self):
        self.translator.register_severity_map({ErrorCode.WARNING: Severity.ERROR})
        self.translator.register_severity_map(None)

        assert self.translator.severity_map is None
        assert self.translator.translate(ErrorCode.WARNING) is Severity.WARNING

    def test_invalid_level_in_map_is_rejected(self):
        with pytest.raises(ValueError):
            self.translator.register_severity_map({ErrorCode.WARNING: "loud"})


class TestSeverityHelpers:

    def test_coerce(self):
        assert Severity.coerce("WARNING") is Severity.WARNING
        assert Severity.coerce(Severity.FATAL) is Severity.FATAL

    def test_from_logging_level(self):
        assert Severity.from_logging_level(logging.CRITICAL) is Severity.FATAL
        assert Severity.from_logging_level(logging.ERROR) is Severity.ERROR
        assert Severity.from_logging_level(logging.WARNING) is Severity.WARNING
        assert Severity.from_logging_level(logging.INFO) is Severity.INFO
        assert Severity.from_logging_level(logging.DEBUG) is Severity.DEBUG

    def test_code_for_warning(self):
        assert code_for_warning(DeprecationWarning) is ErrorCode.USER_DEPRECATED
        assert code_for_warning(PendingDeprecationWarning) is ErrorCode.USER_DEPRECATED
        assert code_for_warning(SyntaxWarning) is ErrorCode.COMPILE_WARNING
        assert code_for_warning(RuntimeWarning) is ErrorCode.WARNING
        assert code_for_warning(UserWarning) is ErrorCode.USER_WARNING
