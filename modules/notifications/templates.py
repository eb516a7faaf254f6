"""
Email templates.

Both auth emails share one dark layout: a gradient header with the site
name, a call-to-action button, and the raw link for clients that strip
buttons.
"""

from datetime import datetime, timezone
from html import escape

from .models import EmailMessage

_LAYOUT = """<!DOCTYPE html>
<html>
  <head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{title}</title>
  </head>
  <body style="margin: 0; padding: 0; font-family: Arial, sans-serif; background-color: #0a0a14;">
    <table width="100%" cellpadding="0" cellspacing="0" style="background-color: #0a0a14;">
      <tr>
        <td align="center" style="padding: 40px 20px;">
          <table width="600" cellpadding="0" cellspacing="0" style="background-color: #1a1a2e; border-radius: 8px; overflow: hidden;">
            <tr>
              <td style="background: linear-gradient(135deg, #667eea 0%, #764ba2 100%); padding: 30px; text-align: center;">
                <h1 style="margin: 0; color: #ffffff; font-size: 28px; font-weight: bold;">{site_name}</h1>
              </td>
            </tr>
            <tr>
              <td style="padding: 40px 30px; color: #e0e0e0;">
                <h2 style="margin: 0 0 20px; color: #ffffff; font-size: 24px;">{title}</h2>
                <p style="margin: 0 0 20px; font-size: 16px; line-height: 1.6;">{intro}</p>
                <table width="100%" cellpadding="0" cellspacing="0">
                  <tr>
                    <td align="center" style="padding: 20px 0;">
                      <a href="{url}" style="display: inline-block; padding: 14px 32px; background: linear-gradient(135deg, #667eea 0%, #764ba2 100%); color: #ffffff; text-decoration: none; border-radius: 6px; font-weight: bold; font-size: 16px;">{button}</a>
                    </td>
                  </tr>
                </table>
                <p style="margin: 20px 0 0; font-size: 14px; line-height: 1.6; color: #b0b0b0;">
                  This link will expire in <strong>{expiry}</strong>. {ignore_note}
                </p>
                <p style="margin: 20px 0 0; font-size: 14px; line-height: 1.6; color: #b0b0b0;">
                  Or copy and paste this link into your browser:<br>
                  <a href="{url}" style="color: #667eea; word-break: break-all;">{url}</a>
                </p>
              </td>
            </tr>
            <tr>
              <td style="padding: 30px; background-color: #0f0f1e; text-align: center; color: #808080; font-size: 12px;">
                <p style="margin: 0 0 10px;">{site_name} &copy; {year}</p>
                <p style="margin: 0;">This is an automated email. Please do not reply.</p>
              </td>
            </tr>
          </table>
        </td>
      </tr>
    </table>
  </body>
</html>
"""

_TEXT = """{title} - {site_name}

{intro}

{url}

This link will expire in {expiry}. {ignore_note}

{site_name} © {year}"""


def _describe_ttl(seconds: int) -> str:
    if seconds % 3600 == 0:
        hours = seconds // 3600
        return f"{hours} hour" if hours == 1 else f"{hours} hours"
    minutes = max(1, seconds // 60)
    return f"{minutes} minute" if minutes == 1 else f"{minutes} minutes"


def _render(
    to: str,
    subject: str,
    title: str,
    intro: str,
    button: str,
    url: str,
    ttl_seconds: int,
    ignore_note: str,
    site_name: str,
) -> EmailMessage:
    fields = {
        "title": title,
        "intro": intro,
        "button": button,
        "expiry": _describe_ttl(ttl_seconds),
        "ignore_note": ignore_note,
        "year": datetime.now(timezone.utc).year,
    }
    html = _LAYOUT.format(
        url=escape(url, quote=True),
        site_name=escape(site_name),
        **{k: escape(str(v)) for k, v in fields.items()},
    )
    text = _TEXT.format(url=url, site_name=site_name, **fields)
    return EmailMessage(to=to, subject=subject, html=html, text=text)


def password_reset_email(to: str, reset_url: str, ttl_seconds: int, site_name: str) -> EmailMessage:
    return _render(
        to=to,
        subject=f"Reset your {site_name} password",
        title="Reset Your Password",
        intro="We received a request to reset your password. Click the button below to choose a new password:",
        button="Reset Password",
        url=reset_url,
        ttl_seconds=ttl_seconds,
        ignore_note="If you didn't request this, you can safely ignore this email.",
        site_name=site_name,
    )


def magic_link_email(to: str, magic_url: str, ttl_seconds: int, site_name: str) -> EmailMessage:
    return _render(
        to=to,
        subject=f"Your magic sign-in link for {site_name}",
        title="Your Magic Sign-In Link",
        intro="Click the button below to sign in to your account. No password needed:",
        button="Sign In",
        url=magic_url,
        ttl_seconds=ttl_seconds,
        ignore_note="If you didn't request this, you can safely ignore this email.",
        site_name=site_name,
    )
