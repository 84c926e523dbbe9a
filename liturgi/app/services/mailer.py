from abc import ABC, abstractmethod


class Mailer(ABC):
    """Outbound email port"""

    @abstractmethod
    async def send(self, to: str, subject: str, body: str, link: str) -> None:
        pass
