"""Message bodies for account e-mails.

Placeholders are filled with ``str.format``; literal braces in the HTML
are doubled.
"""

_HTML_STYLE = """
    <style>
        body {{ font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; }}
        .container {{ max-width: 600px; margin: 0 auto; padding: 20px; }}
        .button {{ display: inline-block; padding: 12px 24px; background: #2563eb; color: white; text-decoration: none; border-radius: 6px; }}
        .footer {{ margin-top: 30px; color: #6b7280; font-size: 14px; }}
    </style>
"""

CONFIRM_EMAIL_SUBJECT = "Confirm your email - Motopsy"

CONFIRM_EMAIL_TEXT = """Hello,

Thank you for registering with Motopsy.

Click the link below to confirm your email address:
{confirm_link}

If you didn't create an account, you can safely ignore this email.

-- Motopsy
"""

CONFIRM_EMAIL_HTML = (
    """
<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">"""
    + _HTML_STYLE
    + """</head>
<body>
    <div class="container">
        <h2>Confirm your email</h2>
        <p>Thank you for registering with Motopsy.</p>
        <p style="margin: 30px 0;">
            <a href="{confirm_link}" class="button">Confirm Email</a>
        </p>
        <p>Or copy and paste this link into your browser:</p>
        <p style="word-break: break-all; color: #6b7280;">{confirm_link}</p>
        <div class="footer">
            <p>If you didn't create an account, you can safely ignore this email.</p>
            <p>-- Motopsy</p>
        </div>
    </div>
</body>
</html>
"""
)

PASSWORD_RESET_SUBJECT = "Password Reset Request - Motopsy"

PASSWORD_RESET_TEXT = """Hello,

You requested a password reset for your Motopsy account.

Click the link below to reset your password (valid for {valid_hours} hours):
{reset_link}

If you didn't request this, you can safely ignore this email.

-- Motopsy
"""

PASSWORD_RESET_HTML = (
    """
<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">"""
    + _HTML_STYLE
    + """</head>
<body>
    <div class="container">
        <h2>Password Reset Request</h2>
        <p>You requested a password reset for your Motopsy account.</p>
        <p>Click the button below to reset your password. This link is valid for {valid_hours} hours.</p>
        <p style="margin: 30px 0;">
            <a href="{reset_link}" class="button">Reset Password</a>
        </p>
        <p>Or copy and paste this link into your browser:</p>
        <p style="word-break: break-all; color: #6b7280;">{reset_link}</p>
        <div class="footer">
            <p>If you didn't request this, you can safely ignore this email.</p>
            <p>-- Motopsy</p>
        </div>
    </div>
</body>
</html>
"""
)

PASSWORD_RESET_SUCCESS_SUBJECT = "Your password was changed - Motopsy"

PASSWORD_RESET_SUCCESS_TEXT = """Hello {display_name},

The password for your Motopsy account was changed successfully.

If you didn't make this change, reset your password immediately and contact us.

-- Motopsy
"""

CONTACT_US_SUBJECT = "Contact form: {name}"

CONTACT_US_TEXT = """New contact form submission

Name: {name}
Email: {email}
Phone: {phone_number}
Registration number: {registration_number}

Message:
{message}
"""
