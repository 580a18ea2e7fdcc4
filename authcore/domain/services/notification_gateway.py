"""Notification gateway interface"""

from abc import ABC, abstractmethod

from ..enums import OtpPurpose


class INotificationGateway(ABC):
    """Delivers OTP messages.

    Implementations raise ``DeliveryFailure`` with a reason when the transport
    rejects the message; any stored OTP stays valid.
    """

    @abstractmethod
    async def send_otp(
        self,
        to_email: str,
        recipient_name: str,
        otp_code: str,
        purpose: OtpPurpose
    ) -> None:
        pass
