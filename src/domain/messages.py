"""Direct message texts sent to sellers."""


def seller_created_message(full_name: str, seller_id: str) -> str:
    return "\n".join(
        [
            f"Hey **{full_name}**!",
            "",
            "Your seller profile with **Payout by Kickz Caviar** has been created.",
            f"Your **Seller ID** is: `{seller_id}`.",
            "",
            "Keep this ID at hand: you will need it for every sale.",
            "Your sales agreement PDF will follow by e-mail.",
            "",
            "Thanks for selling with us 🙌",
        ]
    )


def existing_seller_message(
    user_id: str,
    seller_id: str,
    email: str | None = None,
    order_id: str | None = None,
    invite_url: str | None = None,
) -> str:
    """
    Message for a user who already has a seller profile.

    Used when a duplicate is detected at commit time and by the
    notify-existing-seller HTTP endpoint.
    """
    lines = [
        f"Hey <@{user_id}>!",
        "",
        "You already have an active Seller Profile with **Payout by Kickz Caviar**.",
        "",
        f"Your **Seller ID** is: `{seller_id}`.",
    ]
    if email:
        lines.append(f"This seller profile is registered on: `{email}`.")
    if order_id:
        lines.append(f"This message is about order **{order_id}**.")
    lines += ["", "Next time, you don't need to fill in the full form again.", ""]

    if invite_url:
        lines += [
            "Join the **Payout by Kickz Caviar** server to benefit from **instant deals "
            "and many more sales opportunities**!",
            "",
            f"👉 [Click here]({invite_url})",
        ]
    else:
        lines.append(
            "If you want to catch more **quick deals and buying opportunities**, the best way "
            "is to make your deals directly inside the **Kickz Caviar server**."
        )

    lines += [
        "",
        "If you think this is a mistake or need help with something, contact support in the server.",
        "",
        "Thanks for selling with us 🙌",
    ]
    return "\n".join(lines)
