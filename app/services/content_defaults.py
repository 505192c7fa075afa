"""Default copy for settings, static pages and email templates.

Stored documents are merged over these values; pages and templates with
a default are created from it the first time they are read.
"""

GLOBAL_SETTINGS_KEY = "global_app_settings"

DEFAULT_SETTINGS = {
    "site_name": "Prepify",
    "site_description": "Ace your exams with AI-powered practice.",
    "hero_title": "Excel in Your Tests with Expertly Solved Question Papers",
    "hero_subtitle": (
        "Prepify offers a vast library of solved question papers, complete with detailed "
        "explanations and practice tools to help you excel in your exams."
    ),
    "facebook_url": "",
    "twitter_url": "",
    "instagram_url": "",
    "linkedin_url": "",
    "about_title": "About Prepify",
    "about_subtitle": "Helping students prepare smarter, not harder.",
    "about_mission": "To make quality exam preparation accessible to every student.",
    "about_vision": "A world where every learner walks into an exam hall with confidence.",
    "about_team_title": "Meet the Team",
    "team_members": [],
    "contact_title": "Contact Us",
    "contact_subtitle": "Have a question or a paper request? We would love to hear from you.",
    "contact_email": "",
    "contact_phone": "",
    "contact_address": "",
    "email_from_name": "",
    "email_from_address": "",
}

DEFAULT_PAGES = {
    "terms-of-service": {
        "title": "Terms of Service",
        "content": (
            "**Last Updated:** [Date]\n\n"
            "Welcome to Prepify! These Terms of Service govern your use of the Prepify website "
            "and services. By accessing or using the Service, you agree to be bound by these Terms.\n\n"
            "**1. Accounts**\n\nYou must provide accurate, complete and current information when "
            "you create an account and you are responsible for safeguarding your password.\n\n"
            "**2. Subscriptions**\n\nSome parts of the Service are billed on a subscription basis. "
            "Subscriptions are activated once payment has been verified.\n\n"
            "**3. Changes**\n\nWe may modify these Terms at any time and will give notice before "
            "new terms take effect."
        ),
        "meta_title": "Terms of Service",
        "meta_description": "Read the Terms of Service for using the Prepify application.",
    },
    "privacy-policy": {
        "title": "Privacy Policy",
        "content": (
            "**Last Updated:** [Date]\n\n"
            "This page explains how we collect, use and disclose personal data when you use "
            "Prepify.\n\n"
            "**1. Information Collection and Use**\n\nWe collect your email address, name and "
            "account credentials, along with usage data such as test performance.\n\n"
            "**2. Use of Data**\n\nWe use this data to operate the Service and to manage your "
            "account and subscriptions.\n\n"
            "**3. Contact Us**\n\nIf you have any questions about this Privacy Policy, please "
            "contact us."
        ),
        "meta_title": "Privacy Policy",
        "meta_description": "Learn how Prepify collects, uses and protects your data.",
    },
}

PAGE_NOT_FOUND_TITLE = "Page Not Found"

_TABLE_ROW = (
    '<tr style="border-bottom: 1px solid #eee;">'
    '<td style="padding: 8px 0;"><strong>{label}:</strong></td>'
    '<td style="padding: 8px 0; text-align: right;">{value}</td></tr>'
)


def _summary_table(rows: list[tuple[str, str]]) -> str:
    body = "".join(_TABLE_ROW.format(label=label, value=value) for label, value in rows)
    return f'<table style="width: 100%; border-collapse: collapse;">{body}</table>'


_ORDER_ROWS = [
    ("Order ID", "{{orderId}}"),
    ("Plan", "{{planName}} ({{duration}})"),
    ("Order Date", "{{orderDate}}"),
    ("Payment Method", "{{paymentMethod}}"),
    ("Payment Status", "{{orderStatus}}"),
    ("Subtotal", "PKR {{originalPrice}}"),
    ("Discount", "- PKR {{discountAmount}}"),
    ("Total Amount", "PKR {{finalAmount}}"),
]

_ACTIVATED_ROWS = [
    ("Plan", "{{planName}} ({{duration}})"),
    ("Valid Until", "{{expiryDate}}"),
    ("Total Paid", "PKR {{finalAmount}}"),
]

DEFAULT_EMAIL_TEMPLATES = {
    "order-confirmation": {
        "subject": "Your Order Confirmation ({{orderId}})",
        "body": (
            '<div style="font-family: Arial, sans-serif; line-height: 1.6;">'
            "<h1>Thank You for Your Order!</h1>"
            "<p>Hi {{userName}},</p>"
            "<p>We've received your order and it is now pending payment confirmation. Your "
            "subscription will be activated once the payment is verified by our team.</p>"
            f"{_summary_table(_ORDER_ROWS)}"
            "<h2>Next Steps</h2>"
            "<p>To activate your subscription, please complete the payment and send proof of the "
            "transaction to our support team at {{contactEmail}}.</p>"
            "<p>Thanks,<br>The {{siteName}} Team</p></div>"
        ),
        "is_enabled": True,
    },
    "order-activated": {
        "subject": "Your {{planName}} plan is now active",
        "body": (
            '<div style="font-family: Arial, sans-serif; line-height: 1.6;">'
            "<h1>Your Subscription is Active!</h1>"
            "<p>Hi {{userName}},</p>"
            "<p>Your payment for order {{orderId}} has been verified and your {{planName}} "
            "({{duration}}) plan is now active.</p>"
            f"{_summary_table(_ACTIVATED_ROWS)}"
            "<p>Thanks,<br>The {{siteName}} Team</p></div>"
        ),
        "is_enabled": True,
    },
    "password-changed": {
        "subject": "Your {{siteName}} password was changed",
        "body": (
            '<div style="font-family: Arial, sans-serif; line-height: 1.6;">'
            "<p>Hi {{userName}},</p>"
            "<p>The password for your {{siteName}} account was changed on {{changedAt}}.</p>"
            "<p>If you did not make this change, contact us immediately at {{contactEmail}}.</p>"
            "<p>Thanks,<br>The {{siteName}} Team</p></div>"
        ),
        "is_enabled": True,
    },
}
