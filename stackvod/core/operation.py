from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator

from stackvod.core.events import EventSink
from stackvod.core.events import topic
from stackvod.core.unit_types import UnitKind


class StepName:
    DEPENDENCY = 'dependency'
    ENV = 'env'
    GENERATE = 'generate'
    CONTAINER = 'container'


class StepStatus:
    PENDING = 'pending'
    RUNNING = 'running'
    DONE = 'done'
    FAILED = 'failed'


@dataclass
class Step:
    name: str
    status: str = StepStatus.PENDING
    message: str = ''


class LifecycleOperation:
    def __init__(self, sink: EventSink, kind: UnitKind, unit: str, steps: list[str]):
        self.sink = sink
        self.kind = kind
        self.unit = unit
        self.steps: dict[str, Step] = {name: Step(name) for name in steps}

    def _update(self, step: str, status: str, message: str) -> None:
        self.steps[step].status = status
        self.steps[step].message = message
        self.sink.emit(topic(self.kind, 'progress'), {
            'unit': self.unit,
            'step': step,
            'status': status,
            'message': message,
        })

    def running(self, step: str, message: str) -> None:
        self._update(step, StepStatus.RUNNING, message)

    def done(self, step: str, message: str) -> None:
        self._update(step, StepStatus.DONE, message)

    def failed(self, step: str, message: str) -> None:
        self._update(step, StepStatus.FAILED, message)

    @contextmanager
    def step(self, step: str, running_message: str, done_message: str) -> Iterator['LifecycleOperation']:
        self.running(step, running_message)
        try:
            yield self
        except Exception as e:
            self.failed(step, str(e))
            raise
        self.done(step, done_message)
