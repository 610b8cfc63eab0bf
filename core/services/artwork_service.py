# =============================================================================
# core/services/artwork_service.py - Artwork Business Logic
# =============================================================================
# Translates artwork operations into Supabase queries:
# - list / get artworks with their tags (embedded join through artwork_tags)
# - list / create tags
# - create / update / delete artworks, including image upload and tag linking
#
# Reads never raise: a backend failure is logged and reported as [] or None.
# Multi-step writes (upload, row, tags, links) record how to undo each
# completed step and roll back on failure, then report None.
# =============================================================================

import logging
from uuid import UUID

from lib.supabase_client import SupabaseClient, is_not_found, is_unique_violation
from lib.utils import CompensationLog, normalize_uuid, storage_key_from_url
from core.models.artwork import (
    Artwork,
    ArtworkFormData,
    ArtworkUpdateData,
    ImageUpload,
    Tag,
)
from core.services.storage_service import StorageService

logger = logging.getLogger(__name__)

ARTWORKS_TABLE = "artworks"
TAGS_TABLE = "tags"
ARTWORK_TAGS_TABLE = "artwork_tags"

# Artwork columns plus tags resolved through the join table
ARTWORK_SELECT = "*, artwork_tags(tag_id, tags(id, name))"


class ArtworkService:
    """
    Service for artwork and tag operations.

    Stateless: every method is an independent request against the backend.
    """

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @staticmethod
    def fetch_artworks() -> list[Artwork]:
        """
        Fetch all artworks, newest first, with their tags.

        Returns:
            List of artworks; [] if the backend call fails
        """
        try:
            client = SupabaseClient.get_client()
            response = (
                client.table(ARTWORKS_TABLE)
                .select(ARTWORK_SELECT)
                .order("created_at", desc=True)
                .execute()
            )
            artworks = [Artwork.from_row(row) for row in response.data or []]
            logger.debug(f"Fetched {len(artworks)} artworks")
            return artworks

        except Exception as e:
            logger.error(f"Error fetching artworks: {e}")
            return []

    @staticmethod
    def fetch_artwork_by_id(artwork_id: str | UUID) -> Artwork | None:
        """
        Fetch a single artwork with its tags.

        Returns:
            The artwork, or None if it doesn't exist or the call fails
        """
        artwork_id_str = normalize_uuid(artwork_id)

        try:
            client = SupabaseClient.get_client()
            response = (
                client.table(ARTWORKS_TABLE)
                .select(ARTWORK_SELECT)
                .eq("id", artwork_id_str)
                .single()
                .execute()
            )
            if not response.data:
                return None
            return Artwork.from_row(response.data)

        except Exception as e:
            if is_not_found(e):
                logger.info(f"Artwork not found: {artwork_id_str}")
                return None
            logger.error(f"Error fetching artwork {artwork_id_str}: {e}")
            return None

    @staticmethod
    def fetch_tags() -> list[Tag]:
        """
        Fetch all tags ordered by name.

        Returns:
            List of tags; [] if the backend call fails
        """
        try:
            client = SupabaseClient.get_client()
            response = (
                client.table(TAGS_TABLE)
                .select("id, name")
                .order("name")
                .execute()
            )
            return [Tag(**row) for row in response.data or []]

        except Exception as e:
            logger.error(f"Error fetching tags: {e}")
            return []

    # -------------------------------------------------------------------------
    # Tags
    # -------------------------------------------------------------------------

    @staticmethod
    def create_tag(name: str) -> Tag | None:
        """
        Create a tag.

        If a tag with this exact name already exists (unique violation), the
        existing tag is returned instead.

        Returns:
            The created or existing tag, None on failure
        """
        try:
            tag, _ = ArtworkService._get_or_create_tag(name.strip())
            return tag
        except Exception as e:
            logger.error(f"Error creating tag '{name}': {e}")
            return None

    @staticmethod
    def _find_tags(names: list[str]) -> list[Tag]:
        """Tags whose name exactly matches one of `names`."""
        if not names:
            return []
        client = SupabaseClient.get_client()
        response = (
            client.table(TAGS_TABLE)
            .select("id, name")
            .in_("name", names)
            .execute()
        )
        return [Tag(**row) for row in response.data or []]

    @staticmethod
    def _get_or_create_tag(name: str) -> tuple[Tag, bool]:
        """
        Insert one tag, falling back to the existing row on a unique violation.

        Returns:
            (tag, created) where created is False for an existing tag

        Raises:
            ValueError: If the name is blank
            Exception: Backend errors other than a unique violation
        """
        if not name:
            raise ValueError("Tag name must not be blank")

        client = SupabaseClient.get_client()
        try:
            response = client.table(TAGS_TABLE).insert({"name": name}).execute()
        except Exception as e:
            if not is_unique_violation(e):
                raise
            existing = ArtworkService._find_tags([name])
            if not existing:
                raise
            logger.info(f"Tag '{name}' already exists, reusing it")
            return existing[0], False

        if not response.data:
            raise RuntimeError(f"Insert returned no data for tag '{name}'")
        logger.info(f"Created tag: {name}")
        return Tag(**response.data[0]), True

    @staticmethod
    def _create_tags(names: list[str], undo: CompensationLog) -> list[Tag]:
        """
        Bulk-create tags for names that did not exist at lookup time.

        A concurrent writer may create one of the names in between; the bulk
        insert then fails on the unique constraint and names are resolved one
        by one. Only tags actually created here are registered for undo.
        """
        client = SupabaseClient.get_client()
        created: list[Tag] = []
        resolved: list[Tag] = []

        try:
            response = (
                client.table(TAGS_TABLE)
                .insert([{"name": name} for name in names])
                .execute()
            )
            created = [Tag(**row) for row in response.data or []]
            resolved = list(created)
        except Exception as e:
            if not is_unique_violation(e):
                raise
            logger.info(f"Bulk tag insert hit an existing name, resolving {len(names)} tags individually")
            for name in names:
                tag, was_created = ArtworkService._get_or_create_tag(name)
                resolved.append(tag)
                if was_created:
                    created.append(tag)

        if created:
            created_ids = [tag.id for tag in created]

            def delete_created_tags():
                client.table(TAGS_TABLE).delete().in_("id", created_ids).execute()

            undo.add(f"delete {len(created_ids)} created tags", delete_created_tags)

        if len(resolved) != len(names):
            raise RuntimeError(f"Tag insert returned {len(resolved)} of {len(names)} tags")
        return resolved

    @staticmethod
    def _link_tags(artwork_id: str, names: list[str], undo: CompensationLog) -> list[Tag]:
        """
        Link an artwork to the tags named in `names`, creating missing tags.

        Names are split into those already in the tags table (exact match)
        and new ones; new ones are created, then one join row is inserted per
        tag.

        Returns:
            The linked tags
        """
        if not names:
            return []

        existing = ArtworkService._find_tags(names)
        existing_names = {tag.name for tag in existing}
        new_names = [name for name in names if name not in existing_names]

        created: list[Tag] = []
        if new_names:
            created = ArtworkService._create_tags(new_names, undo)

        tags: list[Tag] = []
        seen: set[str] = set()
        for tag in existing + created:
            if tag.id not in seen:
                seen.add(tag.id)
                tags.append(tag)

        if tags:
            client = SupabaseClient.get_client()
            client.table(ARTWORK_TAGS_TABLE).insert(
                [{"artwork_id": artwork_id, "tag_id": tag.id} for tag in tags]
            ).execute()

            def unlink():
                client.table(ARTWORK_TAGS_TABLE).delete().eq("artwork_id", artwork_id).execute()

            undo.add("remove new tag links", unlink)

        logger.info(
            f"Linked {len(tags)} tags to artwork {artwork_id} "
            f"({len(existing)} existing, {len(new_names)} new)"
        )
        return tags

    # -------------------------------------------------------------------------
    # Images
    # -------------------------------------------------------------------------

    @staticmethod
    def _upload(image: ImageUpload, undo: CompensationLog) -> str:
        """Upload an image, register its removal for undo, return its public URL."""
        key = StorageService.upload_image(image)

        def remove_upload():
            if not StorageService.delete_file(key):
                raise RuntimeError(f"Could not remove uploaded image {key}")

        undo.add(f"remove uploaded image {key}", remove_upload)
        return StorageService.get_public_url(key)

    @staticmethod
    def upload_artwork_image(image: ImageUpload) -> str | None:
        """
        Upload an artwork image and return its public URL.

        Returns:
            Public URL, or None if the upload fails
        """
        undo = CompensationLog("upload artwork image")
        try:
            return ArtworkService._upload(image, undo)
        except Exception as e:
            logger.error(f"Error uploading image: {e}")
            undo.rollback()
            return None

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    @staticmethod
    def create_artwork(form: ArtworkFormData) -> Artwork | None:
        """
        Create an artwork with its image and tags.

        Steps:
        1. Upload the image
        2. Insert the artwork row
        3. Resolve tag names into existing and new tags, create the new ones
        4. Insert the artwork/tag links
        5. Re-fetch the artwork with its tags

        A missing image returns None before any backend call. If any step
        fails, the completed steps are undone and None is returned.

        Returns:
            The created artwork, or None on failure
        """
        if form.image is None:
            logger.warning(f"Refusing to create artwork '{form.title}' without an image")
            return None

        undo = CompensationLog("create artwork")

        try:
            image_url = ArtworkService._upload(form.image, undo)

            client = SupabaseClient.get_client()
            response = (
                client.table(ARTWORKS_TABLE)
                .insert(form.to_row(image_url))
                .execute()
            )
            if not response.data:
                raise RuntimeError("Insert returned no data")

            artwork_id = str(response.data[0]["id"])

            def delete_row():
                client.table(ARTWORKS_TABLE).delete().eq("id", artwork_id).execute()

            undo.add(f"delete artwork row {artwork_id}", delete_row)

            ArtworkService._link_tags(artwork_id, form.tags, undo)

            artwork = ArtworkService.fetch_artwork_by_id(artwork_id)
            if artwork is None:
                raise RuntimeError(f"Created artwork {artwork_id} could not be re-fetched")

            logger.info(f"Created artwork: {artwork_id} ('{artwork.title}', {len(artwork.tags)} tags)")
            return artwork

        except Exception as e:
            logger.error(f"Error creating artwork: {e}")
            failed = undo.rollback()
            if failed:
                logger.error(f"Create artwork left partial state behind: {failed}")
            return None

    @staticmethod
    def update_artwork(artwork_id: str | UUID, data: ArtworkUpdateData) -> Artwork | None:
        """
        Update an artwork.

        - A new image is uploaded and replaces the URL (the old file is kept).
        - Only supplied fields are written.
        - A non-empty `tags` list replaces all links; None or [] keeps them.

        On failure the previous field values and links are restored, the new
        image is removed and tags created by this call are deleted.

        Returns:
            The refreshed artwork, or None if missing or on failure
        """
        artwork_id_str = normalize_uuid(artwork_id)

        previous = ArtworkService.fetch_artwork_by_id(artwork_id_str)
        if previous is None:
            logger.warning(f"Cannot update missing artwork: {artwork_id_str}")
            return None

        undo = CompensationLog("update artwork")

        try:
            client = SupabaseClient.get_client()

            updates = data.field_updates()
            if data.image is not None:
                updates["image"] = ArtworkService._upload(data.image, undo)

            if updates:
                client.table(ARTWORKS_TABLE).update(updates).eq("id", artwork_id_str).execute()

                restore = {
                    field: (previous.status.value if field == "status" else getattr(previous, field))
                    for field in updates
                }

                def restore_fields():
                    client.table(ARTWORKS_TABLE).update(restore).eq("id", artwork_id_str).execute()

                undo.add("restore previous artwork fields", restore_fields)

            if data.tags:
                client.table(ARTWORK_TAGS_TABLE).delete().eq("artwork_id", artwork_id_str).execute()

                previous_tag_ids = [tag.id for tag in previous.tags]

                def restore_links():
                    client.table(ARTWORK_TAGS_TABLE).delete().eq("artwork_id", artwork_id_str).execute()
                    if previous_tag_ids:
                        client.table(ARTWORK_TAGS_TABLE).insert(
                            [{"artwork_id": artwork_id_str, "tag_id": tag_id} for tag_id in previous_tag_ids]
                        ).execute()

                undo.add("restore previous tag links", restore_links)

                ArtworkService._link_tags(artwork_id_str, data.tags, undo)

            artwork = ArtworkService.fetch_artwork_by_id(artwork_id_str)
            if artwork is None:
                raise RuntimeError(f"Updated artwork {artwork_id_str} could not be re-fetched")

            logger.info(f"Updated artwork: {artwork_id_str} (fields: {sorted(updates)})")
            return artwork

        except Exception as e:
            logger.error(f"Error updating artwork {artwork_id_str}: {e}")
            failed = undo.rollback()
            if failed:
                logger.error(f"Update artwork left partial state behind: {failed}")
            return None

    @staticmethod
    def delete_artwork(artwork_id: str | UUID) -> bool:
        """
        Delete an artwork and, best-effort, its image.

        Links are removed by the database (ON DELETE CASCADE). Failure to
        remove the image file is logged and does not change the result.

        Returns:
            True if the row delete succeeded
        """
        artwork_id_str = normalize_uuid(artwork_id)
        artwork = ArtworkService.fetch_artwork_by_id(artwork_id_str)

        try:
            client = SupabaseClient.get_client()
            client.table(ARTWORKS_TABLE).delete().eq("id", artwork_id_str).execute()
            logger.info(f"Deleted artwork: {artwork_id_str}")

        except Exception as e:
            logger.error(f"Error deleting artwork {artwork_id_str}: {e}")
            return False

        if artwork and artwork.image:
            storage_key = storage_key_from_url(artwork.image)
            if storage_key and not StorageService.delete_file(storage_key):
                logger.warning(f"Image for artwork {artwork_id_str} was left in storage: {storage_key}")

        return True
