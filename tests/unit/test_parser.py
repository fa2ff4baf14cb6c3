"""Unit tests for the command grammar parser.

Covers verb recognition, selector syntax, option handling and the
compile errors raised for malformed command lines.
"""

from itertools import islice

import pytest

from kwindo.errors import CompileError, ErrorCode
from kwindo.models import (
    ActionIntent,
    GetActiveWindowIntent,
    SearchIntent,
    SearchMode,
    StackAllSelector,
    StackIndexSelector,
    WindowIdSelector,
)
from kwindo.parser import is_verb, iter_intents, parse_commands, parse_selector
from kwindo.tokens import TokenStream


class TestSelectorParsing:
    """Window operand syntax."""

    def test_stack_all(self):
        assert parse_selector("%@") == StackAllSelector()

    @pytest.mark.parametrize("token,index", [("%1", 1), ("%2", 2), ("%10", 10), ("%007", 7)])
    def test_stack_index(self, token, index):
        assert parse_selector(token) == StackIndexSelector(index=index)

    def test_stack_index_zero_is_accepted(self):
        """Bounds are checked when the script runs, not here."""
        assert parse_selector("%0") == StackIndexSelector(index=0)

    def test_huge_stack_index_is_accepted(self):
        assert parse_selector("%99999").index == 99999

    @pytest.mark.parametrize("token", [
        "{6f0a3c52-1b8e-4a0e-9d37-0f2b61a0c1de}",
        "94371842",
        "firefox",
        "1",
    ])
    def test_window_id(self, token):
        assert parse_selector(token) == WindowIdSelector(window_id=token)

    @pytest.mark.parametrize("token", ["%", "%abc", "%-1", "%1a", "%@@", "% 1", "%1\n", "%2\r\n"])
    def test_invalid_percent_selector(self, token):
        with pytest.raises(CompileError) as exc_info:
            parse_selector(token)

        assert exc_info.value.code == ErrorCode.INVALID_SELECTOR
        assert exc_info.value.token == token
        assert token in exc_info.value.message


class TestVerbs:
    """Command recognition."""

    def test_search(self):
        assert parse_commands(["search", "firefox"]) == [SearchIntent(term="firefox")]

    def test_search_defaults_to_all_fields_mode(self):
        intent = parse_commands(["search", "firefox"])[0]
        assert intent.mode == SearchMode.ALL

    def test_search_term_may_look_like_a_verb(self):
        assert parse_commands(["search", "windowclose"]) == [SearchIntent(term="windowclose")]

    def test_search_term_may_be_percent(self):
        assert parse_commands(["search", "%1"]) == [SearchIntent(term="%1")]

    def test_getactivewindow(self):
        assert parse_commands(["getactivewindow"]) == [GetActiveWindowIntent()]

    def test_getactivewindow_takes_no_operand(self):
        with pytest.raises(CompileError) as exc_info:
            parse_commands(["getactivewindow", "%1"])

        assert exc_info.value.code == ErrorCode.UNKNOWN_COMMAND
        assert exc_info.value.token == "%1"

    @pytest.mark.parametrize("verb", [
        "getwindowname", "getwindowclassname", "getwindowgeometry", "getwindowpid",
        "windowminimize", "windowraise", "windowclose", "windowkill", "windowactivate",
    ])
    def test_every_catalog_verb_is_recognized(self, verb):
        assert is_verb(verb)
        assert parse_commands([verb]) == [ActionIntent(verb=verb, selector=StackIndexSelector(index=1))]

    def test_verbs_are_case_sensitive(self):
        with pytest.raises(CompileError):
            parse_commands(["Search", "x"])

    def test_empty_command_line(self):
        assert parse_commands([]) == []


class TestActionSelectors:
    """Selector extraction after action verbs."""

    def test_default_selector_is_first_stack_entry(self):
        assert parse_commands(["windowclose"]) == [
            ActionIntent(verb="windowclose", selector=StackIndexSelector(index=1))
        ]

    def test_stack_all(self):
        assert parse_commands(["windowminimize", "%@"]) == [
            ActionIntent(verb="windowminimize", selector=StackAllSelector())
        ]

    def test_window_id(self):
        intents = parse_commands(["windowactivate", "{0a1b}"])
        assert intents == [ActionIntent(verb="windowactivate", selector=WindowIdSelector(window_id="{0a1b}"))]

    def test_next_verb_is_not_taken_as_selector(self):
        intents = parse_commands(["getwindowname", "search", "konsole"])

        assert intents == [
            ActionIntent(verb="getwindowname", selector=StackIndexSelector(index=1)),
            SearchIntent(term="konsole"),
        ]

    def test_options_before_selector_are_skipped(self):
        intents = parse_commands(["windowclose", "--sync", "-x", "%2"])
        assert intents == [ActionIntent(verb="windowclose", selector=StackIndexSelector(index=2))]

    def test_options_without_selector(self):
        intents = parse_commands(["windowraise", "--sync"])
        assert intents == [ActionIntent(verb="windowraise", selector=StackIndexSelector(index=1))]

    def test_search_then_action(self):
        intents = parse_commands(["search", "firefox", "getwindowname", "%1"])

        assert intents == [
            SearchIntent(term="firefox"),
            ActionIntent(verb="getwindowname", selector=StackIndexSelector(index=1)),
        ]

    def test_multiple_actions_keep_order(self):
        intents = parse_commands(["search", "x", "windowraise", "%@", "windowactivate", "%2"])

        assert [type(i) for i in intents] == [SearchIntent, ActionIntent, ActionIntent]
        assert intents[1].verb == "windowraise"
        assert intents[2].verb == "windowactivate"
        assert intents[2].selector == StackIndexSelector(index=2)


class TestCompileErrors:
    """Malformed command lines."""

    def test_unknown_command(self):
        with pytest.raises(CompileError) as exc_info:
            parse_commands(["foobar"])

        error = exc_info.value
        assert error.code == ErrorCode.UNKNOWN_COMMAND
        assert error.message == "unknown command: foobar"
        assert error.token == "foobar"

    def test_unknown_command_after_valid_ones(self):
        with pytest.raises(CompileError) as exc_info:
            parse_commands(["search", "x", "windowclose", "%1", "frobnicate"])

        assert exc_info.value.token == "frobnicate"

    def test_missing_search_term(self):
        with pytest.raises(CompileError) as exc_info:
            parse_commands(["search"])

        assert exc_info.value.code == ErrorCode.MISSING_OPERAND
        assert exc_info.value.message == "missing search term"

    def test_option_instead_of_search_term(self):
        with pytest.raises(CompileError) as exc_info:
            parse_commands(["search", "--name"])

        assert exc_info.value.code == ErrorCode.UNEXPECTED_OPTION
        assert exc_info.value.token == "--name"

    def test_option_where_command_expected(self):
        with pytest.raises(CompileError) as exc_info:
            parse_commands(["getactivewindow", "--debug"])

        assert exc_info.value.code == ErrorCode.UNEXPECTED_OPTION
        assert "--debug" in exc_info.value.message

    def test_bad_selector_after_action(self):
        with pytest.raises(CompileError) as exc_info:
            parse_commands(["windowclose", "%x"])

        assert exc_info.value.code == ErrorCode.INVALID_SELECTOR

    def test_errors_carry_suggestion(self):
        with pytest.raises(CompileError) as exc_info:
            parse_commands(["foobar"])

        assert exc_info.value.suggestion
        assert exc_info.value.to_dict()["context"] == {"token": "foobar"}


class TestIncrementalParsing:
    """Intents are produced one at a time."""

    def test_intents_yielded_before_later_error(self):
        intents = iter_intents(TokenStream(["getactivewindow", "foobar"]))

        assert list(islice(intents, 1)) == [GetActiveWindowIntent()]
        with pytest.raises(CompileError):
            next(intents)

    def test_stream_fully_consumed(self):
        stream = TokenStream(["search", "a", "windowclose", "%@"])
        list(iter_intents(stream))

        assert stream.at_end
