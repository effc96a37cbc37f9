# utils/email_service.py
from flask_mail import Mail, Message
from flask import current_app
from threading import Thread

mail = Mail()

def init_mail(app):
    mail.init_app(app)

def _send_async_email(app, msg: Message):
    """
    Runs in a background thread. Logs success or the full exception to the app logger.
    """
    with app.app_context():
        try:
            mail.send(msg)
            app.logger.info("Email sent to %s (subject=%s)", msg.recipients, msg.subject)
        except Exception as e:
            app.logger.exception("Failed to send email to %s (subject=%s): %s", msg.recipients, msg.subject, e)

def send_email_async(app, subject: str, recipients: list, html_body: str, text_body: str = None):
    """
    Fire-and-forget email using a thread.
    Returns the Thread object in case caller wants to join/check it in tests.
    """
    sender = (
        current_app.config.get("MAIL_DEFAULT_SENDER")
        or current_app.config.get("FROM_EMAIL")
        or current_app.config.get("NO_REPLY_EMAIL")
    )
    msg = Message(
        subject=subject,
        recipients=recipients,
        sender=sender,
        reply_to=current_app.config.get("NO_REPLY_EMAIL"),
    )
    if text_body:
        msg.body = text_body
    msg.html = html_body

    current_app.logger.debug(
        "Preparing email send: sender=%s recipients=%s subject=%s",
        msg.sender,
        recipients,
        subject,
    )

    thr = Thread(target=_send_async_email, args=(current_app._get_current_object(), msg))
    thr.daemon = True
    thr.start()
    return thr
