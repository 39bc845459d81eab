# Workers package - processing triggers that drive jobs to completion

from tryon.workers.base import ProcessingTrigger
from tryon.workers.simulated import SimulatedTrigger
from tryon.workers.delegated import (
    Dispatcher,
    HttpDispatcher,
    QueueDispatcher,
    DelegatedTrigger,
)
from tryon.workers.queue import CompositorQueue

__all__ = [
    "ProcessingTrigger",
    "SimulatedTrigger",
    "Dispatcher",
    "HttpDispatcher",
    "QueueDispatcher",
    "DelegatedTrigger",
    "CompositorQueue",
]
