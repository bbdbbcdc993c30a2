"""Phenoflow server - phenotype definitions stored as GitHub repositories.

Each phenotype is one repository in a GitHub organisation. This service
exposes CRUD over phenotypes, their workflow steps and their files:
- Phenotype creation (README, LICENSE and workflow files)
- Step resolution from the phenotype's root .cwl workflow
- Author-gated deletion based on commit history
"""

__version__ = "0.1.0"
