from dataclasses import dataclass, replace
from typing import Optional


@dataclass(frozen=True)
class RestTimer:
    """
    Rusttimer met secondenresolutie.
    Notities:
        - Tijdstippen (now) zijn epoch-seconden van de aanroeper; de timer leest zelf geen klok.
        - accumulated bevat de seconden van eerdere, gepauzeerde runs.
    """
    running: bool = False
    accumulated: int = 0
    started_at: Optional[float] = None

    def elapsed(self, now):
        if not self.running or self.started_at is None:
            return self.accumulated
        return self.accumulated + max(int(now - self.started_at), 0)

    def start(self, now):
        if self.running:
            return self
        return replace(self, running=True, started_at=now)

    def pause(self, now):
        if not self.running:
            return self
        return RestTimer(running=False, accumulated=self.elapsed(now))

    def reset(self):
        return RestTimer()

    def to_dict(self):
        return {'running': self.running, 'accumulated': self.accumulated, 'started_at': self.started_at}

    @classmethod
    def from_dict(cls, data):
        if not data:
            return cls()
        return cls(
            running=bool(data.get('running')),
            accumulated=int(data.get('accumulated') or 0),
            started_at=data.get('started_at'),
        )


def format_seconds(total_seconds):
    minutes, seconds = divmod(max(int(total_seconds), 0), 60)
    return f'{minutes:02d}:{seconds:02d}'
