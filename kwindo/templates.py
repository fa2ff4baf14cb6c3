"""KWin script templates.

Rendering is a pure function of a step and the render context: the same
steps rendered with the same context always produce the same text.

String values from the command line (search terms, window ids) and the
marker are embedded as JSON string literals, which are valid JavaScript
string literals, so quotes and backslashes reach KWin unchanged.
"""

import json
from string import Template
from typing import Callable, Dict, Type

from .actions import get_action
from .models import (
    ActionOnIdStep,
    ActionOnStackAllStep,
    ActionOnStackItemStep,
    Channel,
    FinalOutputStep,
    GetActiveWindowStep,
    RenderContext,
    SearchMode,
    SearchStep,
    Step,
)
from .protocol import channel_tag

INDENT = "    "

PROLOGUE = Template("""\
print($start);

function output_debug(message) {
$debug_body}

function output_error(message) {
    print($error, message);
}

function output_result(message) {
    print($result, message);
}

function run() {
    var window_stack = [];
""")

EPILOGUE = Template("""\
}

run();

print($finish);
""")

# Bodies below are indented for the inside of run().

SEARCH_ALL = """\
        var mismatch = false;
        for (var j = 0; j < candidates.length; j++) {
            if (candidates[j].search(re) < 0) {
                mismatch = true;
                break;
            }
        }
        if (!mismatch) {
            window_stack.push(w);
        }
"""

SEARCH_ANY = """\
        for (var j = 0; j < candidates.length; j++) {
            if (candidates[j].search(re) >= 0) {
                window_stack.push(w);
                break;
            }
        }
"""

STEP_SEARCH = Template("""\
$trace\
    var re = new RegExp($term, "i");
    var t = $window_list;
    window_stack = [];
    for (var i = 0; i < t.length; i++) {
        var w = t[i];
        var candidates = [w.caption, w.resourceClass, w.resourceName, w.windowRole];
$trace_candidates\
$match\
    }
""")

STEP_GETACTIVEWINDOW = Template("""\
$trace\
    window_stack = [workspace.activeWindow];
""")

STEP_ACTION_ON_WINDOW_ID = Template("""\
$trace\
    var t = $window_list;
    for (var i = 0; i < t.length; i++) {
        var w = t[i];
        if (w.internalId == $window_id) {
            $action
            break;
        }
    }
""")

STEP_ACTION_ON_STACK_ITEM = Template("""\
$trace\
    if (window_stack.length > 0) {
        if ($index > window_stack.length || $index < 1) {
            output_error($out_of_range);
        } else {
            var w = window_stack[$index - 1];
            $action
        }
    }
""")

STEP_ACTION_ON_STACK_ALL = Template("""\
$trace\
    for (var i = 0; i < window_stack.length; i++) {
        var w = window_stack[i];
        $action
    }
""")

STEP_FINAL_OUTPUT = """\
    for (var i = 0; i < window_stack.length; ++i) {
        output_result(window_stack[i].internalId);
    }
"""


def js_string(value: str) -> str:
    """Quote a Python string as a JavaScript string literal."""
    return json.dumps(value)


def out_of_range_message(index: int) -> str:
    return f"Invalid window stack selection '{index}' (out of range)"


def _window_list(context: RenderContext) -> str:
    # KWin 5 calls windows "clients".
    return "workspace.clientList()" if context.kde5 else "workspace.windowList()"


def _trace(context: RenderContext, message: str) -> str:
    if not context.debug:
        return ""
    return f"{INDENT}output_debug({js_string(message)});\n"


def render_prologue(context: RenderContext) -> str:
    marker = context.marker
    debug_body = ""
    if context.debug:
        debug_body = f"{INDENT}print({js_string(channel_tag(marker, Channel.DEBUG))}, message);\n"
    return PROLOGUE.substitute(
        start=js_string(channel_tag(marker, Channel.START)),
        debug_body=debug_body,
        error=js_string(channel_tag(marker, Channel.ERROR)),
        result=js_string(channel_tag(marker, Channel.RESULT)),
    )


def render_epilogue(context: RenderContext) -> str:
    return EPILOGUE.substitute(finish=js_string(channel_tag(context.marker, Channel.FINISH)))


def render_search(step: SearchStep, context: RenderContext) -> str:
    trace_candidates = ""
    if context.debug:
        trace_candidates = f"{INDENT * 2}output_debug(candidates);\n"
    return STEP_SEARCH.substitute(
        trace=_trace(context, f"STEP search {step.term}"),
        term=js_string(step.term),
        window_list=_window_list(context),
        trace_candidates=trace_candidates,
        match=SEARCH_ANY if step.mode == SearchMode.ANY else SEARCH_ALL,
    )


def render_getactivewindow(step: GetActiveWindowStep, context: RenderContext) -> str:
    return STEP_GETACTIVEWINDOW.substitute(trace=_trace(context, "STEP getactivewindow"))


def render_action_on_id(step: ActionOnIdStep, context: RenderContext) -> str:
    return STEP_ACTION_ON_WINDOW_ID.substitute(
        trace=_trace(context, f"STEP {step.verb}"),
        window_list=_window_list(context),
        window_id=js_string(step.window_id),
        action=get_action(step.verb).fragment,
    )


def render_action_on_stack_item(step: ActionOnStackItemStep, context: RenderContext) -> str:
    return STEP_ACTION_ON_STACK_ITEM.substitute(
        trace=_trace(context, f"STEP {step.verb}"),
        index=step.index,
        out_of_range=js_string(out_of_range_message(step.index)),
        action=get_action(step.verb).fragment,
    )


def render_action_on_stack_all(step: ActionOnStackAllStep, context: RenderContext) -> str:
    return STEP_ACTION_ON_STACK_ALL.substitute(
        trace=_trace(context, f"STEP {step.verb}"),
        action=get_action(step.verb).fragment,
    )


def render_final_output(step: FinalOutputStep, context: RenderContext) -> str:
    return STEP_FINAL_OUTPUT


_RENDERERS: Dict[Type, Callable[..., str]] = {
    SearchStep: render_search,
    GetActiveWindowStep: render_getactivewindow,
    ActionOnIdStep: render_action_on_id,
    ActionOnStackItemStep: render_action_on_stack_item,
    ActionOnStackAllStep: render_action_on_stack_all,
    FinalOutputStep: render_final_output,
}


def render_step(step: Step, context: RenderContext) -> str:
    """Render one step as a block of statements inside run()."""
    return _RENDERERS[type(step)](step, context)

