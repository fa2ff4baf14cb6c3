"""Script lowering engine.

Parses and lowers in one left-to-right pass: each intent becomes exactly
one step the moment the parser yields it. A FinalOutput step is appended
only when the last intent was a query, so ``search foo`` prints the ids
it found while ``search foo windowclose`` prints nothing.

Script text is assembled only after the whole command line has been
consumed, so a CompileError never leaves a partial script behind.
"""

import logging
from typing import List, Sequence

from .models import (
    ActionIntent,
    ActionOnIdStep,
    ActionOnStackAllStep,
    ActionOnStackItemStep,
    CompiledScript,
    FinalOutputStep,
    GetActiveWindowIntent,
    GetActiveWindowStep,
    Intent,
    RenderContext,
    SearchIntent,
    SearchStep,
    StackAllSelector,
    StackIndexSelector,
    Step,
    WindowIdSelector,
    is_query,
)
from .parser import iter_intents
from .templates import render_step, render_prologue, render_epilogue
from .tokens import TokenStream

logger = logging.getLogger(__name__)


def lower_intent(intent: Intent) -> Step:
    """
    Lower one command intent to the step that implements it.

    Args:
        intent: Parsed command intent

    Returns:
        The corresponding step
    """
    if isinstance(intent, SearchIntent):
        return SearchStep(term=intent.term, mode=intent.mode)

    if isinstance(intent, GetActiveWindowIntent):
        return GetActiveWindowStep()

    if isinstance(intent, ActionIntent):
        selector = intent.selector
        if isinstance(selector, WindowIdSelector):
            return ActionOnIdStep(verb=intent.verb, window_id=selector.window_id)
        if isinstance(selector, StackIndexSelector):
            return ActionOnStackItemStep(verb=intent.verb, index=selector.index)
        if isinstance(selector, StackAllSelector):
            return ActionOnStackAllStep(verb=intent.verb)

    raise TypeError(f"Cannot lower {intent!r}")


def compile_script(tokens: Sequence[str], context: RenderContext) -> CompiledScript:
    """
    Compile a command line into a KWin script.

    Args:
        tokens: Positional command line arguments (global options removed)
        context: Marker and compile-time flags

    Returns:
        CompiledScript with the steps and the rendered text

    Raises:
        CompileError: On the first malformed token
    """
    steps: List[Step] = []
    blocks: List[str] = []
    last_is_query = False

    for intent in iter_intents(TokenStream(tokens)):
        step = lower_intent(intent)
        logger.debug(f"Lowered {intent!r} -> {step!r}")
        steps.append(step)
        blocks.append(render_step(step, context))
        last_is_query = is_query(intent)

    if last_is_query:
        final = FinalOutputStep()
        steps.append(final)
        blocks.append(render_step(final, context))

    text = "\n".join([render_prologue(context), *blocks, render_epilogue(context)])
    return CompiledScript(marker=context.marker, steps=steps, text=text)
