"""Third-party checks run in front of a claim (captcha, Discord membership)."""

from faucet.adapters.verification.base import AbstractCaptchaVerifier, AbstractMembershipVerifier
from faucet.adapters.verification.discord import DiscordMembershipVerifier
from faucet.adapters.verification.hcaptcha import HCaptchaVerifier

__all__ = [
    "AbstractCaptchaVerifier",
    "AbstractMembershipVerifier",
    "DiscordMembershipVerifier",
    "HCaptchaVerifier",
]
