from typing import Any

from akeditz.infra.errors import ClientError
from akeditz.utils.validators import is_valid_email

# module akeditz.contact.repository
def send_message(client, name: str, email: str, subject: str, message: str) -> Any:
    """
    Envoie le formulaire de contact (POST /contact/contact/send).
    - name, email, subject et message requis; validés avant l'appel
    """
    fields = [(v or "").strip() for v in (name, email, subject, message)]
    if not all(fields):
        raise ClientError("All fields are required", status=400)
    name, email, subject, message = fields
    if not is_valid_email(email):
        raise ClientError("Please enter a valid email address", status=400)
    return client.post(
        "/contact/contact/send",
        json={"name": name, "email": email, "subject": subject, "message": message},
    )
