"""Pipeline phase and percentage tracking."""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, List, Optional

from common.logging_config import get_logger

logger = get_logger(__name__)


class Phase(str, Enum):
    IDLE = "idle"
    UPLOADING_CHUNKS = "uploading-chunks"
    CREATING_INODE = "creating-inode"
    MINTING = "minting"
    DONE = "done"
    FAILED = "failed"


TERMINAL_PHASES = (Phase.DONE, Phase.FAILED)

ALLOWED_TRANSITIONS = {
    Phase.IDLE: {Phase.UPLOADING_CHUNKS},
    Phase.UPLOADING_CHUNKS: {Phase.UPLOADING_CHUNKS, Phase.CREATING_INODE},
    Phase.CREATING_INODE: {Phase.CREATING_INODE, Phase.MINTING, Phase.DONE},
    Phase.MINTING: {Phase.MINTING, Phase.DONE},
    Phase.DONE: set(),
    Phase.FAILED: set(),
}


@dataclass(frozen=True)
class PipelineProgress:
    """
    Immutable snapshot of pipeline progress.

    Each pipeline step returns the next snapshot; total steps are the chunk
    count plus one for the inode and one for the mint.
    """
    phase: Phase = Phase.IDLE
    completed_steps: int = 0
    total_steps: int = 0
    message: str = ""
    chunk_count: int = 0

    @property
    def percentage(self) -> float:
        if self.phase == Phase.DONE:
            return 100.0
        if self.total_steps == 0:
            return 0.0
        return self.completed_steps / self.total_steps * 100

    @property
    def is_terminal(self) -> bool:
        return self.phase in TERMINAL_PHASES

    def _move(self, phase: Phase, **changes) -> 'PipelineProgress':
        if phase == Phase.FAILED:
            if self.is_terminal:
                raise ValueError(f"Cannot fail from terminal phase '{self.phase.value}'")
        elif phase not in ALLOWED_TRANSITIONS[self.phase]:
            raise ValueError(f"Invalid progress transition: {self.phase.value} -> {phase.value}")
        return replace(self, phase=phase, **changes)

    def start(self, chunk_count: int) -> 'PipelineProgress':
        return self._move(
            Phase.UPLOADING_CHUNKS,
            completed_steps=0,
            total_steps=chunk_count + 2,
            chunk_count=chunk_count,
            message="Starting upload...",
        )

    def uploading_chunk(self, index: int) -> 'PipelineProgress':
        return self._move(
            Phase.UPLOADING_CHUNKS,
            message=f"Uploading chunk {index + 1}/{self.chunk_count}...",
        )

    def chunk_done(self, index: int, message: str) -> 'PipelineProgress':
        return self._move(Phase.UPLOADING_CHUNKS, completed_steps=index + 1, message=message)

    def creating_inode(self, message: str = "Creating file inode...") -> 'PipelineProgress':
        return self._move(Phase.CREATING_INODE, completed_steps=self.chunk_count, message=message)

    def inode_done(self, message: str) -> 'PipelineProgress':
        return self._move(Phase.CREATING_INODE, completed_steps=self.chunk_count + 1, message=message)

    def minting(self, message: str = "Minting token...") -> 'PipelineProgress':
        return self._move(Phase.MINTING, message=message)

    def done(self, message: str) -> 'PipelineProgress':
        return self._move(Phase.DONE, completed_steps=self.total_steps, message=message)

    def fail(self, message: str) -> 'PipelineProgress':
        return self._move(Phase.FAILED, message=message)

    def reset(self) -> 'PipelineProgress':
        return PipelineProgress()


ProgressListener = Callable[[PipelineProgress], None]


class ProgressTracker:
    """
    Holds the latest progress snapshot and notifies listeners of each change.

    Observational only: the pipeline never reads it back to decide what to do.
    """

    def __init__(self, listener: Optional[ProgressListener] = None):
        self.current = PipelineProgress()
        self.history: List[PipelineProgress] = []
        self._listeners: List[ProgressListener] = []
        if listener is not None:
            self._listeners.append(listener)

    def subscribe(self, listener: ProgressListener) -> None:
        self._listeners.append(listener)

    def publish(self, progress: PipelineProgress) -> PipelineProgress:
        """
        Record a new snapshot and notify listeners.

        Returns:
            The snapshot, so callers can fold it into the next step
        """
        self.current = progress
        self.history.append(progress)
        logger.debug(f"Progress: {progress.phase.value} {progress.percentage:.0f}% - {progress.message}")
        for listener in self._listeners:
            listener(progress)
        return progress

    def reset(self) -> PipelineProgress:
        self.history.clear()
        return self.publish(self.current.reset())
