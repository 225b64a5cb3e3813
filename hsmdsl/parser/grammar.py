# hsmdsl/parser/grammar.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

"""
Grammar for a single logical line of a state diagram body.

Lines are parsed one at a time; constructs that span several lines (composite
blocks, note bodies, skinparam/style/json blocks) are recognized by their
opening line here and collected by the reader.
"""

from lark import Lark

GRAMMAR = r"""
plantuml_line: _statement
mermaid_line: _statement
            | direction_directive

_statement: state_block
          | state_declaration
          | implicit_declaration
          | transition
          | floating_note
          | state_note
          | link_note
          | concurrent
          | skinparam
          | style
          | json
          | hide_directive
          | scale_directive

state_block: _STATE binding _COLOR* "{" BLOCK_CLOSE?
state_declaration: _STATE binding stereotype? _COLOR* description?
implicit_declaration: binding description

binding: QUOTED _AS scoped_name        -> visual_first
        | dotted_name _AS QUOTED        -> visual_last
        | scoped_name                   -> plain_binding

scoped_name: dotted_name
           | QUOTED
dotted_name: NAME ("." NAME)*

transition: endpoint _ARROW endpoint description?
endpoint: PSEUDOSTATE                                   -> bare_endpoint
        | scoped_name PSEUDOSTATE? stereotype? _COLOR*  -> named_endpoint

floating_note: _NOTE QUOTED _AS NAME _COLOR*
state_note: _NOTE POSITION _OF scoped_name _COLOR* description?
link_note: _NOTE _ON _LINK _COLOR* description?

concurrent: CONCURRENT
skinparam: SKINPARAM
style: STYLE
json: JSON
hide_directive: HIDE
scale_directive: _SCALE INT _WIDTH
direction_directive: _DIRECTION DIRECTION

stereotype: STEREOTYPE
description: DESCRIPTION

_STATE: /state\b/i
_AS: /as\b/i
_NOTE: /note\b/i
_OF: /of\b/i
_ON: /on\b/i
_LINK: /link\b/i
_SCALE: /scale\b/i
_WIDTH: /width\b/i
_DIRECTION: /direction\b/i

POSITION: /(left|right|top|bottom)\b/i
NAME: /\w+/
QUOTED: /"(?:[^"\\]|\\.)*"/
PSEUDOSTATE: "[*]" | "[H*]" | "[H]"
STEREOTYPE: /<<\s*\w+\s*>>/
DESCRIPTION: /:[^\n]*\S/
_ARROW: /-[^>\n]*>/
_COLOR: /#[^\s{]*/
CONCURRENT: "--" | "||"
BLOCK_CLOSE: "}"
SKINPARAM: /skinparam\b[^\n]*/i
STYLE: /<style>[^\n]*/i
JSON: /json\s[^\n]*\{[^\n]*/i
HIDE: /hide\s+empty\s+description/i
INT: /\d+/
DIRECTION: /(TB|TD|BT|LR|RL)\b/

%import common.WS_INLINE
%ignore WS_INLINE
"""

LINE_PARSER = Lark(
    GRAMMAR,
    start=["plantuml_line", "mermaid_line"],
    parser="earley",
    lexer="dynamic",
)
