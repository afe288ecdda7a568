"""Cloud storage module for Disk Harvester.

This module handles all Azure Blob Storage interaction:
- TokenFetcher: Anonymous read of the access token blob
- ContainerProvisioner: Destination container lookup/creation
- BlobDestination: File uploads into the destination container
"""
