import logging

import docker

from .tree import UNTAGGED, ContainerRecord, ImageRecord

logger = logging.getLogger(__name__)

def join_tags(repo_tags) -> str:
    """Join RepoTags, mapping every flavour of "untagged" to the sentinel."""
    tags = [tag for tag in (repo_tags or []) if tag != UNTAGGED]
    if not tags:
        return UNTAGGED
    return ", ".join(tags)

class DockerInventory:
    """Read-only view of the images and containers known to a Docker daemon."""

    def __init__(self, client):
        self.client = client

    @classmethod
    def from_env(cls, timeout: int = 60):
        """Connects using DOCKER_HOST and friends, failing fast if unreachable."""
        client = docker.from_env(timeout=timeout)
        client.ping()  # Verify connection
        return cls(client)

    def parent_reference_of(self, image_id: str) -> str:
        """The image this one was built from, as recorded in its config."""
        inspected = self.client.api.inspect_image(image_id)
        return (inspected.get("Config") or {}).get("Image") or ""

    def list_images(self):
        """Returns every image, intermediate layers included."""
        # Low-level listing: Created is epoch seconds, Size is bytes
        raw_images = self.client.api.images(all=True)
        records = []
        for raw in raw_images:
            image_id = raw["Id"]
            records.append(ImageRecord(
                id=image_id,
                parent=self.parent_reference_of(image_id),
                tags=join_tags(raw.get("RepoTags")),
                size=raw.get("Size") or 0,
                created=raw.get("Created") or 0,
            ))
        logger.info(f"Found {len(records)} images")
        return records

    def list_containers(self):
        """Returns every container, running or stopped."""
        raw_containers = self.client.api.containers(all=True)
        records = [
            ContainerRecord(
                id=raw["Id"],
                image_id=raw["ImageID"],
                names=tuple(raw.get("Names") or ()),
            )
            for raw in raw_containers
        ]
        logger.info(f"Found {len(records)} containers")
        return records
