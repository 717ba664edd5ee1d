"""Verifier interfaces. Both report a plain pass/fail."""

from __future__ import annotations

from abc import ABC, abstractmethod


class AbstractCaptchaVerifier(ABC):
    @property
    @abstractmethod
    def enabled(self) -> bool:
        """Whether verification is configured at all."""
        raise NotImplementedError

    @abstractmethod
    async def verify(self, response_token: str | None, remote_ip: str | None = None) -> bool:
        """Return True if the captcha response is valid."""
        raise NotImplementedError

    async def aclose(self) -> None:
        return None


class AbstractMembershipVerifier(ABC):
    @property
    @abstractmethod
    def enabled(self) -> bool:
        """Whether a membership requirement is configured."""
        raise NotImplementedError

    @abstractmethod
    async def is_member(self, access_token: str) -> bool:
        """Return True if the token's user is an accepted member."""
        raise NotImplementedError

    async def aclose(self) -> None:
        return None
