"""mht — device-description file parser.

Modules
───────
  grammar — line grammar, ParserConfig, field / binding tokenizing
  parser  — byte stream → ParseResult (single forward pass, fail-fast)
  result  — immutable ParseResult and its incremental builder
  lookup  — read-only queries: icon, label, datapoint, listening items
  cli     — argparse entry-point
"""
