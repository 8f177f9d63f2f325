"""
Command Line Interface Package

Unified CLI (beancount-gocardless-importer) for all importer operations.

Command Structure:
- sign-in, list-institutions, create-requisition, list-requisitions,
  delete-requisition, list-transactions: GoCardless API commands
- import: Append new transactions to a Beancount ledger
- version, config: Utility commands
"""
