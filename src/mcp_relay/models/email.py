"""
Email models: the sendEmail tool arguments, the message handed to the
provider, and the receipt returned on success.
"""

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from mcp_relay.normalize import is_email_address


class SendEmailArgs(BaseModel):
    """sendEmail tool input schema."""
    model_config = ConfigDict(populate_by_name=True)

    to: Union[str, list[str]] = Field(description="Recipient address or list of addresses")
    subject: str = Field(description="Subject line")
    body: str = Field(description="Plain-text body")
    html_body: Optional[str] = Field(None, alias="htmlBody", description="Optional HTML body")
    sender: Optional[str] = Field(None, alias="from", description="Optional sender address")

    @field_validator("to")
    @classmethod
    def _check_recipients(cls, value: Union[str, list[str]]) -> Union[str, list[str]]:
        # Blank list entries are dropped later by the normalizer.
        addresses = [value] if isinstance(value, str) else [v for v in value if v.strip()]
        for address in addresses:
            if not is_email_address(address):
                raise ValueError(f"Invalid email format: {address.strip() or '(empty)'}")
        return value


class EmailMessage(BaseModel):
    to: Union[str, list[str]] = ""
    subject: Optional[str] = None
    sender: Optional[str] = None
    text: Optional[str] = None
    html: Optional[str] = None

    @property
    def recipients(self) -> list[str]:
        return [self.to] if isinstance(self.to, str) else list(self.to)

    def to_provider_payload(self) -> dict:
        """Shape expected by the provider port: {from, to, subject, text?, html?}."""
        payload = {"from": self.sender, "to": self.recipients, "subject": self.subject}
        if self.text:
            payload["text"] = self.text
        if self.html:
            payload["html"] = self.html
        return payload


class EmailReceipt(BaseModel):
    id: Optional[str] = None
    to: list[str] = []
