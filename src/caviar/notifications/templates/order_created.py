"""Order created template: staff alert sent when a new order is placed."""

DATE_FORMAT = "%d.%m.%Y %H:%M"

_DELIVERY_LABELS = {
    "post_office": "Post office",
    "courier": "Courier",
    "address": "To address",
}


class OrderCreatedTemplate:
    title = "New order"
    default_channels = ["telegram"]

    @staticmethod
    def render(order) -> str:
        customer = order.customer_info
        delivery = order.delivery_info

        lines = [
            "<b>New order!</b>",
            "",
            f"<b>Number:</b> {order.order_number}",
            f"<b>Total:</b> {order.total_amount.amount} {order.total_amount.currency}",
        ]
        if order.created_at:
            lines.append(f"<b>Date:</b> {order.created_at.strftime(DATE_FORMAT)}")
        if customer.display_name:
            lines.append(f"<b>Customer:</b> {customer.display_name}")
        if customer.phone:
            lines.append(f"<b>Phone:</b> {customer.phone}")

        label = _DELIVERY_LABELS.get(delivery.delivery_type, delivery.delivery_type)
        lines.append(f"<b>Delivery:</b> {label}")
        lines.append(f"<b>City:</b> {delivery.city}, {delivery.country}")
        if delivery.post_office:
            lines.append(f"<b>Post office:</b> {delivery.post_office}")
        if delivery.address:
            lines.append(f"<b>Address:</b> {delivery.address}")

        lines.append("")
        lines.append(f"<b>Items:</b> {len(order.items)}")
        if order.notes:
            lines.append("")
            lines.append(f"<b>Notes:</b> {order.notes}")

        return "\n".join(lines) + "\n"
