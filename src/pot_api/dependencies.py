from typing import Protocol, cast

from fastapi import Request

from pot_api.queues.facade import JobQueue
from pot_api.services.runner import JobRunner
from pot_api.services.verifier import Verifier
from pot_api.settings import Settings


class HasServices(Protocol):
    settings: Settings
    queue: JobQueue
    verifier: Verifier
    runner: JobRunner


def _state(request: Request) -> HasServices:
    return cast(HasServices, request.app.state)


def get_settings(request: Request) -> Settings:
    return _state(request).settings


def get_queue(request: Request) -> JobQueue:
    return _state(request).queue


def get_verifier(request: Request) -> Verifier:
    return _state(request).verifier


def get_runner(request: Request) -> JobRunner:
    return _state(request).runner
