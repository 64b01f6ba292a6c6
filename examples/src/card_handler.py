import card_format

CARDS = {
    "c-1": {"title": "Welcome", "body": "First card"},
}


def handler(event, context=None):
    card_id = (event.get("pathParameters") or {}).get("id")
    card = CARDS.get(card_id)
    if card is None:
        return card_format.response(404, {"error": f"card {card_id} not found"})
    return card_format.response(200, dict(card, id=card_id))
