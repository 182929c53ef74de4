"""
JMC Repair — Workshop Quote Builder

Packages:
    core/    Amount parsing, quote model, ledger math, currency, paths, config
    forms/   Printable PDF quote and CSV export
    api/     HTTP routes the quote form talks to
"""
