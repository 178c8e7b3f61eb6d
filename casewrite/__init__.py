"""Casewrite: disability case intake backed by a generative model on AWS Bedrock."""

__version__ = "1.0.0"
