"""
Product image bookkeeping between the database and Cloudinary.

Product images live under `products/<slug>/<color>/` in Cloudinary and are
referenced by public id from ProductImage rows. When a product is edited,
colours can be renamed (matched by position in the comma-separated colour
list), removed or added, and the slug itself can change. The functions here
move the Cloudinary assets and keep the image rows pointing at them.
"""
import logging

from sgtmake.core import cloudinary_service
from sgtmake.core.cloudinary_service import MediaStorageError
from sgtmake.core.utils import create_audit_log
from .models import ProductImage

logger = logging.getLogger(__name__)


def parse_color_list(value):
    """Split a comma-separated colour string into a clean list"""
    if not value:
        return []
    return [color.strip() for color in value.split(',') if color.strip()]


def diff_colors(previous_colors, incoming_colors):
    """
    Compare colour lists position by position.

    Returns a dict with:
        color_changes: [{'from', 'to', 'position'}] colours renamed in place
        colors_to_delete: colours whose position no longer exists
        colors_to_add: [{'color', 'position'}] colours at new positions
    """
    color_changes = []
    colors_to_delete = []
    colors_to_add = []

    for position in range(max(len(previous_colors), len(incoming_colors))):
        old_color = previous_colors[position] if position < len(previous_colors) else None
        new_color = incoming_colors[position] if position < len(incoming_colors) else None

        if old_color and new_color and old_color != new_color:
            color_changes.append({'from': old_color, 'to': new_color, 'position': position})
        elif old_color and not new_color:
            colors_to_delete.append(old_color)
        elif new_color and not old_color:
            colors_to_add.append({'color': new_color, 'position': position})

    return {
        'color_changes': color_changes,
        'colors_to_delete': colors_to_delete,
        'colors_to_add': colors_to_add,
    }


def color_folder(slug, color):
    return f'products/{slug}/{color}/'


# Appended to a target id while colours swap folders
STAGING_SUFFIX = '__moving'


def _rename(product, old_id, new_id):
    """Rename one asset and repoint its rows. Returns True when the asset moved."""
    try:
        cloudinary_service.rename_resource(old_id, new_id)
    except MediaStorageError as e:
        logger.warning(f"Could not rename image {old_id} -> {new_id}: {str(e)}")
        return False
    ProductImage.objects.filter(product=product, image_public_id=old_id).update(image_public_id=new_id)
    return True


def plan_color_moves(old_slug, new_slug, color_changes):
    """
    List every renamed colour's assets before anything is moved.

    Returns [(old public id, new public id)] taken from the folders as they
    were before the edit.
    """
    moves = []
    for change in color_changes:
        old_prefix = color_folder(old_slug, change['from'])
        new_prefix = color_folder(new_slug, change['to'])
        try:
            resources = cloudinary_service.list_resources(old_prefix)
        except MediaStorageError as e:
            logger.warning(f"Error listing colour images under {old_prefix}: {str(e)}")
            resources = []

        for resource in resources:
            old_id = resource.get('public_id', '')
            if not old_id.startswith(old_prefix):
                continue
            new_id = new_prefix + old_id[len(old_prefix):]
            if old_id != new_id:
                moves.append((old_id, new_id))
    return moves


def apply_moves(product, moves):
    """
    Rename assets, staging those whose target is still occupied by another
    move's source. Returns a mapping of old public id -> current public id.
    """
    sources = {old_id for old_id, _new_id in moves}
    renamed = {}
    staged = []

    for old_id, new_id in moves:
        if new_id in sources:
            staging_id = new_id + STAGING_SUFFIX
            if _rename(product, old_id, staging_id):
                staged.append((old_id, staging_id, new_id))
        elif _rename(product, old_id, new_id):
            renamed[old_id] = new_id

    for old_id, staging_id, new_id in staged:
        renamed[old_id] = new_id if _rename(product, staging_id, new_id) else staging_id
    return renamed


def rename_color_images(product, old_slug, new_slug, color_changes):
    """
    Move every asset of the renamed colours to their new folders.

    Returns a mapping of old public id -> new public id for the assets moved.
    """
    # Row ownership as it was before the edit
    owned_rows = {
        change['to']: list(product.images.filter(color_variant=change['from']).values_list('pk', flat=True))
        for change in color_changes
    }
    renamed = apply_moves(product, plan_color_moves(old_slug, new_slug, color_changes))

    for color, pks in owned_rows.items():
        ProductImage.objects.filter(pk__in=pks).update(color_variant=color)
    return renamed


def delete_color_images(product, color):
    """Delete a removed colour's images from Cloudinary and the database"""
    images = list(product.images.filter(color_variant=color))
    for image in images:
        cloudinary_service.safe_destroy(image.image_public_id)
        image.delete()
    return len(images)


def rename_slug_images(product, old_slug, new_slug, skip_colors=()):
    """Move the remaining images from the old slug folder to the new one"""
    old_prefix = f'products/{old_slug}/'
    new_prefix = f'products/{new_slug}/'
    moves = []

    for image in product.images.exclude(color_variant__in=list(skip_colors)):
        old_id = image.image_public_id
        if old_id.startswith(old_prefix):
            moves.append((old_id, new_prefix + old_id[len(old_prefix):]))
    return apply_moves(product, moves)


def merge_renames(first, second):
    """Chain a later rename pass onto an earlier one, keyed by the original ids"""
    merged = {old_id: second.get(new_id, new_id) for old_id, new_id in first.items()}
    moved_into = set(first.values())
    for old_id, new_id in second.items():
        if old_id not in moved_into:
            merged.setdefault(old_id, new_id)
    return merged


def audit_renames(request, product, renamed):
    """Write one audit entry per moved asset"""
    rows = dict(
        ProductImage.objects.filter(product=product, image_public_id__in=list(renamed.values()))
        .values_list('image_public_id', 'pk')
    )
    for old_id, new_id in renamed.items():
        create_audit_log(request, 'image_rename', 'ProductImage', rows.get(new_id, product.pk),
                         object_name=product.title, object_reference=new_id,
                         changes={'from': old_id, 'to': new_id})


def _normalize_other(entry, index):
    """Gallery entries are either a public id or {'publicId', 'sequence'}"""
    if isinstance(entry, dict):
        public_id = entry.get('publicId') or entry.get('public_id')
        sequence = entry.get('sequence')
        return public_id, index if sequence is None else int(sequence)
    return entry, index


def reconcile_images(product, variants, renamed=None):
    """
    Make the product's image rows match the incoming colour variants.

    Returns (processed_colors, image_updates, desired_public_ids).
    """
    renamed = renamed or {}
    # Query fresh rows, a prefetched cache would still hold pre-rename ids
    existing = {image.image_public_id: image for image in ProductImage.objects.filter(product=product)}
    desired_public_ids = set()
    image_updates = 0
    processed_colors = []

    def upsert(public_id, color_name, sequence):
        nonlocal image_updates
        public_id = renamed.get(public_id, public_id)
        desired_public_ids.add(public_id)
        image = existing.get(public_id)
        if image is None:
            existing[public_id] = ProductImage.objects.create(
                product=product,
                image_public_id=public_id,
                color_variant=color_name,
                sequence=sequence,
            )
        elif image.color_variant != color_name or image.sequence != sequence:
            image.color_variant = color_name
            image.sequence = sequence
            image.save(update_fields=['color_variant', 'sequence'])
            image_updates += 1
        return public_id

    for variant in variants:
        color_name = (variant.get('color') or '').strip()
        if not color_name:
            processed_colors.append({'color': '', 'thumbnail': '', 'others': []})
            continue

        thumbnail = ''
        if variant.get('thumbnail'):
            thumbnail = upsert(variant['thumbnail'], color_name, ProductImage.THUMBNAIL_SEQUENCE)

        others = []
        for index, entry in enumerate(variant.get('others') or []):
            public_id, sequence = _normalize_other(entry, index)
            if public_id:
                others.append(upsert(public_id, color_name, sequence))

        processed_colors.append({'color': color_name, 'thumbnail': thumbnail, 'others': others})

    return processed_colors, image_updates, desired_public_ids


def delete_orphan_images(product, desired_public_ids):
    """Remove images that are no longer part of any colour variant"""
    orphans = list(product.images.exclude(image_public_id__in=desired_public_ids))
    for image in orphans:
        cloudinary_service.safe_destroy(image.image_public_id)
        image.delete()
    return len(orphans)


def sync_product_images(product, new_slug, variants, request=None):
    """
    Apply a product edit's colour and slug changes to its images.

    `product` must still carry its previous slug and colour list. The caller
    saves the new product fields afterwards.
    """
    old_slug = product.slug
    previous_colors = product.colors
    incoming_colors = [(v.get('color') or '').strip() for v in variants]
    incoming_colors = [c for c in incoming_colors if c]

    diff = diff_colors(previous_colors, incoming_colors)
    renamed = rename_color_images(product, old_slug, new_slug, diff['color_changes'])

    for color in diff['colors_to_delete']:
        delete_color_images(product, color)

    if old_slug != new_slug:
        skip = [change['to'] for change in diff['color_changes']]
        renamed = merge_renames(renamed, rename_slug_images(product, old_slug, new_slug, skip_colors=skip))

    processed_colors, image_updates, desired = reconcile_images(product, variants, renamed)
    deleted_orphans = delete_orphan_images(product, desired)

    if renamed:
        audit_renames(request, product, renamed)
        logger.info(f"Renamed {len(renamed)} images for product {product.pk} ({old_slug} -> {new_slug})")

    return {
        'processed_colors': processed_colors,
        'color_changes': diff['color_changes'],
        'colors_deleted': diff['colors_to_delete'],
        'colors_added': diff['colors_to_add'],
        'image_updates': image_updates,
        'images_renamed': len(renamed),
        'orphans_deleted': deleted_orphans,
        'incoming_colors': incoming_colors,
    }


def create_product_images(product, variants):
    """Create image rows for a new product's colour variants"""
    processed_colors, _updates, _desired = reconcile_images(product, variants)
    return processed_colors


def delete_all_product_images(product):
    """Remove every Cloudinary asset stored under the product's folder"""
    try:
        return cloudinary_service.delete_folder_resources(product.image_folder)
    except MediaStorageError as e:
        logger.warning(f"Could not delete images for product {product.pk}: {str(e)}")
        return 0
