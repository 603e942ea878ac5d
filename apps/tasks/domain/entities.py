# apps/tasks/domain/entities.py
from enum import Enum


class TaskStatus(str, Enum):
    INBOX = 'inbox'
    TODO = 'todo'
    SCHEDULED = 'scheduled'
    DONE = 'done'
    WAITING = 'waiting'
    BLOCKED = 'blocked'
    CANCELLED = 'cancelled'
