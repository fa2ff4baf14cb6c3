"""
Pydantic data models for kwindo.

Covers the three stages of a run: command intents produced by the parser,
steps produced by the lowering engine, and records decoded from the
KWin log once the script has executed.
"""

from enum import Enum
from typing import Annotated, List, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


# Enumerations

class Channel(str, Enum):
    """Output line classification in the marker protocol."""
    START = "START"
    DEBUG = "DEBUG"
    ERROR = "ERROR"
    RESULT = "RESULT"
    FINISH = "FINISH"


class SearchMode(str, Enum):
    """How a search term must match the candidate fields of a window."""
    ALL = "all"
    ANY = "any"


# Selectors

class WindowIdSelector(BaseModel):
    """Address a window directly by its KWin internal id."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["window_id"] = "window_id"
    window_id: str = Field(..., min_length=1, description="KWin internalId")


class StackIndexSelector(BaseModel):
    """Address one element of the window stack, 1-based.

    The index is not bounds checked here. The stack only exists while the
    script runs, so the generated code checks it and reports an ERROR line.
    """
    model_config = ConfigDict(frozen=True)

    kind: Literal["stack_index"] = "stack_index"
    index: int = Field(..., ge=0, description="1-based window stack position")


class StackAllSelector(BaseModel):
    """Address every element of the window stack."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["stack_all"] = "stack_all"


Selector = Union[WindowIdSelector, StackIndexSelector, StackAllSelector]


# Command intents

class SearchIntent(BaseModel):
    """Replace the window stack with windows matching a pattern."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["search"] = "search"
    term: str = Field(..., description="Case-insensitive regular expression")
    mode: SearchMode = Field(SearchMode.ALL, description="Field quantifier")


class GetActiveWindowIntent(BaseModel):
    """Replace the window stack with the active window."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["getactivewindow"] = "getactivewindow"


class ActionIntent(BaseModel):
    """Apply a catalog action to the windows picked by a selector."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["action"] = "action"
    verb: str = Field(..., description="Action registry verb")
    selector: Selector = Field(..., discriminator="kind")


Intent = Union[SearchIntent, GetActiveWindowIntent, ActionIntent]


def is_query(intent: Intent) -> bool:
    """Query intents replace the window stack; actions only read it."""
    return isinstance(intent, (SearchIntent, GetActiveWindowIntent))


# Steps

class SearchStep(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["search"] = "search"
    term: str
    mode: SearchMode = SearchMode.ALL


class GetActiveWindowStep(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["getactivewindow"] = "getactivewindow"


class ActionOnIdStep(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["action_on_id"] = "action_on_id"
    verb: str
    window_id: str


class ActionOnStackItemStep(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["action_on_stack_item"] = "action_on_stack_item"
    verb: str
    index: int


class ActionOnStackAllStep(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["action_on_stack_all"] = "action_on_stack_all"
    verb: str


class FinalOutputStep(BaseModel):
    """Emit the ids of the final window stack as RESULT lines."""
    model_config = ConfigDict(frozen=True)

    kind: Literal["final_output"] = "final_output"


Step = Union[
    SearchStep,
    GetActiveWindowStep,
    ActionOnIdStep,
    ActionOnStackItemStep,
    ActionOnStackAllStep,
    FinalOutputStep,
]


# Compilation

class RenderContext(BaseModel):
    """Compile-time flags that alter the emitted script text."""
    model_config = ConfigDict(frozen=True)

    marker: str = Field(..., min_length=1, description="Per-invocation output marker")
    debug: bool = Field(False, description="Emit DEBUG lines")
    kde5: bool = Field(False, description="Target the KDE 5 scripting API")

    @field_validator('marker')
    @classmethod
    def validate_marker(cls, v: str) -> str:
        """Markers are matched as a single space-delimited word in the log."""
        if any(ch.isspace() for ch in v):
            raise ValueError(f"Marker must not contain whitespace: {v!r}")
        return v


class CompiledScript(BaseModel):
    """Script text together with the steps it was rendered from."""

    marker: str
    steps: List[Annotated[Step, Field(discriminator="kind")]] = Field(default_factory=list)
    text: str

    @property
    def has_final_output(self) -> bool:
        return bool(self.steps) and isinstance(self.steps[-1], FinalOutputStep)


# Decoded output

class LogRecord(BaseModel):
    """One marker-tagged line recovered from the KWin log."""

    channel: Channel
    payload: str = ""


class ScriptOutput(BaseModel):
    """Everything a run of the script reported, in emission order."""

    records: List[LogRecord] = Field(default_factory=list)

    @property
    def results(self) -> List[str]:
        return [r.payload for r in self.records if r.channel == Channel.RESULT]

    @property
    def errors(self) -> List[str]:
        return [r.payload for r in self.records if r.channel == Channel.ERROR]

    @property
    def debug(self) -> List[str]:
        return [r.payload for r in self.records if r.channel == Channel.DEBUG]

    @property
    def started(self) -> bool:
        return any(r.channel == Channel.START for r in self.records)

    @property
    def finished(self) -> bool:
        return any(r.channel == Channel.FINISH for r in self.records)
