"""Phenotype services: tree walking, step resolution, authorship and provisioning."""
