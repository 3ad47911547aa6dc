import logging
from django.conf import settings
from twilio.rest import Client as TwilioClient
from core.constants import TRANSFER_STATUS_APPROVED

logger = logging.getLogger(__name__)


def format_mobile_number(mobile_number):
    """Return the number in E.164 form, prefixing local 10-digit numbers with the country code."""
    number = (mobile_number or '').strip()
    if number.startswith('+'):
        return number
    if len(number) == 10:
        return f"{settings.SMS_COUNTRY_CODE}{number}"
    return f"+{number}"


def send_sms(mobile_number, message):
    """
    Send an SMS through Twilio.

    Returns True when the message was handed to Twilio. Missing Twilio
    settings or any delivery error are logged and reported as False.
    """
    if not (settings.TWILIO_ACCOUNT_SID and settings.TWILIO_AUTH_TOKEN and settings.TWILIO_PHONE_NUMBER):
        logger.info(f"Twilio is not configured, skipping SMS to {mobile_number}")
        return False
    to = format_mobile_number(mobile_number)
    try:
        client = TwilioClient(settings.TWILIO_ACCOUNT_SID, settings.TWILIO_AUTH_TOKEN)
        client.messages.create(
            body=message,
            from_=settings.TWILIO_PHONE_NUMBER,
            to=to
        )
        logger.info(f"SMS notification sent to {to}")
        return True
    except Exception as e:
        logger.error(f"Failed to send SMS to {to}: {str(e)}")
        return False


def notify_transfer_decision(transfer):
    """Tell the customer whether their job transfer request was approved or rejected."""
    if transfer.status == TRANSFER_STATUS_APPROVED:
        message = (
            f"Dear {transfer.full_name}, your job transfer request has been approved. "
            f"Your selected job is now '{transfer.to_program.name}'."
        )
    else:
        message = (
            f"Dear {transfer.full_name}, your job transfer request to '{transfer.to_program.name}' "
            f"was not approved. Your current job '{transfer.from_program.name}' is unchanged."
        )
    return send_sms(transfer.mobile_number, message)
