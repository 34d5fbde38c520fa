import uuid

from inventory.validation import MovementProposal


def receipt(product, location, quantity, **kwargs):
    return MovementProposal(
        movement_type="IN", product_id=product.id, to_location_id=location.id, quantity=str(quantity), **kwargs
    )


def issue(product, location, quantity, **kwargs):
    return MovementProposal(
        movement_type="OUT", product_id=product.id, from_location_id=location.id, quantity=str(quantity), **kwargs
    )


def transfer(product, source, destination, quantity, **kwargs):
    return MovementProposal(
        movement_type="MOVE",
        product_id=product.id,
        from_location_id=source.id,
        to_location_id=destination.id,
        quantity=str(quantity),
        **kwargs,
    )


def adjustment(product, location, quantity, direction, **kwargs):
    return MovementProposal(
        movement_type="ADJUST",
        product_id=product.id,
        to_location_id=location.id,
        quantity=str(quantity),
        direction=direction,
        **kwargs,
    )


def count(product, location, quantity, **kwargs):
    return MovementProposal(
        movement_type="COUNT", product_id=product.id, to_location_id=location.id, quantity=str(quantity), **kwargs
    )


def new_key() -> str:
    return str(uuid.uuid4())
