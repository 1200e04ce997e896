"""
Status tables behind the customer notification emails.

Each entry maps a status to its display label, badge colours, progress
percentage and the copy used in the email. `{ref}` is replaced with the
order id or the service type.
"""

DEFAULT_STATUS_STYLE = {'color': '#757575', 'bg_color': '#EEEEEE'}

ORDER_STATUS_INFO = {
    'pending': {
        'label': 'Pending',
        'color': '#FF9800',
        'bg_color': '#FFF3E0',
        'progress': 25,
        'subject': 'Your Order #{ref} Has Been Received - SGTMake',
        'message': "Thank you for your order! We've received your order #{ref} and it's currently being reviewed. We'll begin processing it shortly.",
        'next_steps': "Our team will verify your order details and payment. Once confirmed, your order status will change to 'Processing'.",
    },
    'ongoing': {
        'label': 'Processing',
        'color': '#2196F3',
        'bg_color': '#E3F2FD',
        'progress': 50,
        'subject': 'Your Order #{ref} Is Being Processed - SGTMake',
        'message': 'Great news! Your order #{ref} is now being processed. Our team is working diligently to prepare your items for shipment.',
        'next_steps': "Your items are being prepared for shipment. You'll receive another notification when your order ships with tracking information.",
    },
    'shipped': {
        'label': 'Shipped',
        'color': '#4CAF50',
        'bg_color': '#E8F5E9',
        'progress': 75,
        'subject': 'Your Order #{ref} Has Been Shipped - SGTMake',
        'message': "Your order #{ref} has been shipped and is on its way to you! You'll receive another notification when it's delivered.",
        'next_steps': "Your package is on its way to you. You'll receive another notification when it's delivered.",
    },
    'delivered': {
        'label': 'Delivered',
        'color': '#4CAF50',
        'bg_color': '#E8F5E9',
        'progress': 100,
        'subject': 'Your Order #{ref} Has Been Delivered - SGTMake',
        'message': "Your order #{ref} has been successfully delivered! We hope you're enjoying your purchase and thank you for shopping with SGTMake.",
        'next_steps': "If you have any questions or need support with your delivered items, please don't hesitate to contact our customer service team.",
    },
    'cancelled': {
        'label': 'Cancelled',
        'color': '#F44336',
        'bg_color': '#FFEBEE',
        'progress': 0,
        'subject': 'Your Order #{ref} Has Been Cancelled - SGTMake',
        'message': "Your order #{ref} has been cancelled as requested. If this was a mistake or you'd like to place a new order, please visit our website.",
        'next_steps': 'Any payment made for this order will be refunded according to our refund policy. If you have questions about your refund, please contact our support team.',
    },
}

ORDER_FALLBACK_INFO = {
    'progress': 0,
    'subject': 'Update on Your Order #{ref} - SGTMake',
    'message': "There's been an update to your order #{ref}. Please check your account for more details.",
    'next_steps': 'Log in to your account to view more details about your order.',
}

SERVICE_STATUS_INFO = {
    'pending': {
        'label': 'Requested',
        'color': '#FF9800',
        'bg_color': '#FFF3E0',
        'progress': 10,
        'subject': 'Your {ref} Request Has Been Received - SGTMake',
        'message': "We've received your {ref} request and it's currently under review. Our team will assess your requirements and get back to you shortly.",
        'next_steps': "Our team will review your request and update the status to 'Approved' once we've confirmed all details.",
    },
    'approved': {
        'label': 'Review & Approved',
        'color': '#FF9800',
        'bg_color': '#FFF3E0',
        'progress': 25,
        'subject': 'Your {ref} Request Has Been Approved - SGTMake',
        'message': "Great news! Your {ref} request has been reviewed and approved. We're preparing to begin work on your project.",
        'next_steps': 'Your project will soon move to the production phase where our team will begin working on your specifications.',
    },
    'production': {
        'label': 'In Production',
        'color': '#2196F3',
        'bg_color': '#E3F2FD',
        'progress': 50,
        'subject': 'Your {ref} Is Now In Production - SGTMake',
        'message': "We're excited to inform you that your {ref} is now in production. Our skilled team is working diligently to meet your specifications.",
        'next_steps': 'Once production is complete, your item will undergo quality testing to ensure it meets our standards.',
    },
    'testing': {
        'label': 'Quality Test',
        'color': '#2196F3',
        'bg_color': '#E3F2FD',
        'progress': 75,
        'subject': 'Your {ref} Is In Quality Testing - SGTMake',
        'message': "Your {ref} has moved to quality testing. We're ensuring everything meets our high standards before proceeding to the next step.",
        'next_steps': 'After passing quality tests, your item will be prepared for shipping to your specified address.',
    },
    'shipped': {
        'label': 'Shipped',
        'color': '#4CAF50',
        'bg_color': '#E8F5E9',
        'progress': 90,
        'subject': 'Your {ref} Has Been Shipped - SGTMake',
        'message': 'Your {ref} has been shipped and is on its way to you! You should receive it shortly.',
        'next_steps': "You can track your delivery using the information in your account. The status will update to 'Delivered' once received.",
    },
    'delivered': {
        'label': 'Delivered',
        'color': '#4CAF50',
        'bg_color': '#E8F5E9',
        'progress': 100,
        'subject': 'Your {ref} Has Been Delivered - SGTMake',
        'message': 'Your {ref} has been successfully delivered. We hope it meets your expectations and thank you for choosing SGTMake.',
        'next_steps': "If you have any questions or need support with your delivered item, please don't hesitate to contact us.",
    },
    'cancelled': {
        'label': 'Cancelled',
        'color': '#F44336',
        'bg_color': '#FFEBEE',
        'progress': 0,
        'subject': 'Your {ref} Request Has Been Cancelled - SGTMake',
        'message': "Your {ref} request has been cancelled as requested. If this was a mistake or you'd like to resubmit, please contact our support team.",
        'next_steps': 'If you wish to resubmit your request or have any questions, please contact our customer support team.',
    },
    'cancel_requested': {
        'label': 'Cancel Requested',
        'color': '#F44336',
        'bg_color': '#FFEBEE',
        'progress': 0,
        'subject': 'Your {ref} Cancellation Request Received - SGTMake',
        'message': "We've received your request to cancel your {ref}. Our team is reviewing this request and will follow up shortly.",
        'next_steps': "We'll review your cancellation request and update you on the status within 1-2 business days.",
    },
}

SERVICE_FALLBACK_INFO = {
    'progress': 0,
    'subject': 'Update on Your {ref} Request - SGTMake',
    'message': "There's been an update to your {ref} request. Please check your account for more details.",
    'next_steps': 'Log in to your account to view more details about your service request.',
}

QUOTE_STATUS_INFO = {
    'pending': {
        'emoji': '⏳',
        'title': 'Quote Under Review',
        'color': '#f59e0b',
        'bg_color': '#fef3c7',
        'message': 'Your quote request is being reviewed by our team.',
    },
    'quoted': {
        'emoji': '💰',
        'title': 'Quote Ready',
        'color': '#3b82f6',
        'bg_color': '#dbeafe',
        'message': 'Your quote is ready! Please review the pricing details.',
    },
    'accepted': {
        'emoji': '✅',
        'title': 'Quote Accepted',
        'color': '#22c55e',
        'bg_color': '#dcfce7',
        'message': "Thank you for accepting our quote! We'll process your order soon.",
    },
    'rejected': {
        'emoji': '❌',
        'title': 'Quote Declined',
        'color': '#ef4444',
        'bg_color': '#fee2e2',
        'message': "We understand this quote didn't meet your requirements.",
    },
}


def _resolve(table, fallback, status, ref):
    info = table.get(status)
    if info is None:
        info = dict(fallback, label=status, **DEFAULT_STATUS_STYLE)
    resolved = dict(info)
    for key in ('subject', 'message', 'next_steps'):
        resolved[key] = resolved[key].format(ref=ref)
    return resolved


def get_order_status_info(status, order_id):
    """Copy and styling for an order status email"""
    return _resolve(ORDER_STATUS_INFO, ORDER_FALLBACK_INFO, status, order_id)


def get_service_status_info(status, service_type):
    """Copy and styling for a service request status email"""
    return _resolve(SERVICE_STATUS_INFO, SERVICE_FALLBACK_INFO, status, service_type)


def get_quote_status_info(status):
    info = QUOTE_STATUS_INFO.get(status)
    if info is None:
        return {
            'emoji': '📋',
            'title': 'Quote Updated',
            'message': 'Your quote status has been updated.',
            **DEFAULT_STATUS_STYLE,
        }
    return dict(info)


def get_order_timeline(status):
    """Timeline steps shown in order emails; cancelled orders get no timeline"""
    if status == 'cancelled':
        return []
    return [
        {'name': 'Order Placed', 'completed': True},
        {'name': 'Processing', 'completed': status not in ('pending', 'cancelled')},
        {'name': 'Shipped', 'completed': status in ('shipped', 'delivered')},
        {'name': 'Delivered', 'completed': status == 'delivered'},
    ]
