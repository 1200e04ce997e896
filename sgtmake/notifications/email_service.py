"""
Email notifications sent over Zoho SMTP.

Messages are rendered from Django templates and delivered through the
configured mail backend. Failures are logged and reported to the caller,
never raised, so a status change never fails because of email.
"""
import logging
from decimal import Decimal

from django.conf import settings
from django.core.mail import BadHeaderError, EmailMultiAlternatives
from django.template.loader import render_to_string
from django.utils import timezone
from django.utils.html import strip_tags

from .formatting import format_amount, format_inr, format_long_date
from .status_info import (
    get_order_status_info, get_service_status_info, get_quote_status_info, get_order_timeline,
)

logger = logging.getLogger(__name__)

STORE_SENDER_NAME = 'SGTMAKE Store'
SERVICES_SENDER_NAME = 'SGTMAKE Services'
DEFAULT_SENDER_NAME = 'SGTMake'


def is_email_configured():
    return bool(settings.EMAIL_HOST_USER and settings.EMAIL_HOST_PASSWORD)


def _sender(name):
    address = settings.EMAIL_HOST_USER or 'noreply@sgtmake.com'
    return f'{name} <{address}>'


def _base_context():
    return {
        'site_url': getattr(settings, 'SITE_URL', 'https://sgtmake.com').rstrip('/'),
        'admin_email': settings.ADMIN_EMAIL,
        'year': timezone.now().year,
    }


def send_html_email(to, subject, template_name, context, cc=None, sender_name=DEFAULT_SENDER_NAME):
    """
    Render a template and send it as an HTML email with a plain-text fallback.

    Raises the mail backend's exception on failure; callers decide how to report it.
    """
    html = render_to_string(template_name, {**_base_context(), **context, 'subject': subject})
    message = EmailMultiAlternatives(
        subject=subject,
        body=strip_tags(html),
        from_email=_sender(sender_name),
        to=[to] if isinstance(to, str) else list(to),
        cc=list(cc or []),
    )
    message.attach_alternative(html, 'text/html')
    message.send(fail_silently=False)
    logger.info(f"Email sent to {to}: {subject}")


def _quote_customer(quote):
    user = quote.user
    return {
        'name': user.display_name if user else 'Customer',
        'email': user.email if user else '',
        'phone': user.phone if user else '',
    }


def _quote_items(quote):
    items = []
    for item in quote.items or []:
        specifications = item.get('specifications') or {}
        items.append({
            'type': item.get('type', ''),
            'category_name': item.get('categoryName', ''),
            'title': item.get('title', ''),
            'quantity': item.get('quantity', 0),
            'specifications': [
                {'name': key, 'value': ', '.join(map(str, value)) if isinstance(value, (list, tuple)) else value}
                for key, value in specifications.items()
            ],
            'image': item.get('image'),
        })
    return items


def quote_short_id(quote):
    return str(quote.pk).zfill(8)[-8:]


def send_quote_response_email(quote):
    """Tell the customer their quote is ready. Returns True when sent."""
    customer = _quote_customer(quote)
    if not customer['email']:
        logger.warning(f"Quote {quote.pk} has no customer email, skipping quote response email")
        return False

    subject = f"Your Quote is Ready - ₹{format_amount(quote.quoted_price)} | SGTMake"
    context = {
        'quote': quote,
        'quote_ref': quote_short_id(quote),
        'customer': customer,
        'items': _quote_items(quote),
        'quoted_price': format_inr(quote.quoted_price),
        'valid_until_text': (
            f"Valid until {format_long_date(quote.valid_until)}" if quote.valid_until else 'Valid for 30 days'
        ),
    }
    try:
        send_html_email(
            customer['email'], subject, 'notifications/quote_response.html', context,
            cc=settings.ADMIN_CC_EMAILS,
        )
        return True
    except (OSError, BadHeaderError) as e:
        logger.error(f"Error sending quote response email for quote {quote.pk}: {str(e)}")
        return False


def send_quote_status_email(quote):
    """Tell the customer their quote changed status. Returns True when sent."""
    customer = _quote_customer(quote)
    if not customer['email']:
        logger.warning(f"Quote {quote.pk} has no customer email, skipping status email")
        return False

    subject = f"Quote Status Update - {quote.status.upper()} | SGTMake"
    context = {
        'quote': quote,
        'quote_ref': quote_short_id(quote),
        'customer': customer,
        'items': _quote_items(quote),
        'status_info': get_quote_status_info(quote.status),
        'quoted_price': format_inr(quote.quoted_price) if quote.quoted_price is not None else None,
        'updated_on': format_long_date(timezone.localdate()),
    }
    try:
        send_html_email(customer['email'], subject, 'notifications/quote_status.html', context)
        return True
    except (OSError, BadHeaderError) as e:
        logger.error(f"Error sending quote status email for quote {quote.pk}: {str(e)}")
        return False


def send_quote_acceptance_notification(quote):
    """Notify the admin team that a customer accepted a quote"""
    customer = _quote_customer(quote)
    subject = f"Quote Accepted - ₹{format_amount(quote.quoted_price)} | {customer['name']}"
    context = {
        'quote': quote,
        'quote_ref': quote_short_id(quote),
        'customer': customer,
        'items': _quote_items(quote),
        'quoted_price': format_inr(quote.quoted_price),
        'accepted_on': format_long_date(timezone.localdate()),
    }
    try:
        send_html_email(
            settings.ADMIN_EMAIL, subject, 'notifications/quote_acceptance.html', context,
            cc=settings.ADMIN_CC_EMAILS,
        )
        return True
    except (OSError, BadHeaderError) as e:
        logger.error(f"Error sending quote acceptance notification for quote {quote.pk}: {str(e)}")
        return False


def send_quote_request_notification(quote):
    """Notify the admin team about a newly submitted quote request"""
    customer = _quote_customer(quote)
    subject = f"New Quote Request - {quote.total_items} items | {customer['name']}"
    context = {
        'quote': quote,
        'quote_ref': quote_short_id(quote),
        'customer': customer,
        'items': _quote_items(quote),
    }
    try:
        send_html_email(
            settings.ADMIN_EMAIL, subject, 'notifications/quote_request.html', context,
            cc=settings.ADMIN_CC_EMAILS,
        )
        return True
    except (OSError, BadHeaderError) as e:
        logger.error(f"Error sending quote request notification for quote {quote.pk}: {str(e)}")
        return False


def build_order_summary(order):
    """Subtotal is the sum of base prices; discount is what the customer saved"""
    lines = []
    subtotal = Decimal('0')
    for item in order.items.all():
        base_price = Decimal(str(item.base_price or 0))
        subtotal += base_price * item.quantity
        lines.append({
            'title': item.title,
            'variant': item.variant,
            'quantity': item.quantity,
            'price': format_inr(item.line_total),
            'image': item.image,
        })
    total = Decimal(str(order.total or 0))
    discount = subtotal - total
    return {
        'items': lines,
        'subtotal': format_inr(subtotal),
        'discount': format_inr(discount) if discount > 0 else None,
        'total': format_inr(total) if order.total is not None else 'N/A',
    }


def send_order_status_email(order, status):
    """Email the customer about an order status change. Returns {success, message}."""
    email = order.user.email if order.user else None
    if not email:
        return {'success': False, 'message': 'No email address found for user'}
    if not is_email_configured():
        logger.warning("Email service not configured, skipping order status email")
        return {'success': False, 'message': 'Email service not configured'}

    status_info = get_order_status_info(status, order.order_id)
    context = {
        'order': order,
        'status': status,
        'status_info': status_info,
        'customer_name': order.user.display_name or 'Valued Customer',
        'timeline': get_order_timeline(status),
        'formatted_date': format_long_date(timezone.localdate()),
        **build_order_summary(order),
    }
    try:
        send_html_email(
            email, status_info['subject'], 'notifications/order_status.html', context,
            sender_name=STORE_SENDER_NAME,
        )
    except (OSError, BadHeaderError) as e:
        logger.error(f"Error sending order status email for order {order.order_id}: {str(e)}")
        return {'success': False, 'message': str(e)}
    return {'success': True, 'message': 'Email sent successfully'}


def send_service_status_email(service, status):
    """Email the customer about a service request status change. Returns {success, message}."""
    email = service.user.email if service.user else None
    if not email:
        return {'success': False, 'message': 'No email address found for user'}
    if not is_email_configured():
        logger.warning("Email service not configured, skipping service status email")
        return {'success': False, 'message': 'Email service not configured'}

    status_info = get_service_status_info(status, service.service_type)
    context = {
        'service': service,
        'status': status,
        'status_info': status_info,
        'customer_name': service.user.display_name or 'Valued Customer',
        'formatted_date': format_long_date(timezone.localdate()),
    }
    try:
        send_html_email(
            email, status_info['subject'], 'notifications/service_status.html', context,
            sender_name=SERVICES_SENDER_NAME,
        )
    except (OSError, BadHeaderError) as e:
        logger.error(f"Error sending service status email for service {service.pk}: {str(e)}")
        return {'success': False, 'message': str(e)}
    return {'success': True, 'message': 'Email sent successfully'}
