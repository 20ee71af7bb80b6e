#!/usr/bin/env python3
"""
expr_compiler.py
Single-expression compiler pipeline used by the visualizer
(lexer → recursive-descent parser → tree printer / semantic report
→ TAC IR → pseudo-assembly).

Every phase keeps its state on objects created for one call, so two
compilations never share temporary numbering or variable bookkeeping.
"""

import logging
import re
import sys
from collections import namedtuple

log = logging.getLogger(__name__)

# =====================================================
# ERRORS
# =====================================================
class CompileError(Exception):
    """First failure of a compilation. ``phase`` names the stage."""
    phase = "Compile"

    def __init__(self, message, phase=None):
        super().__init__(message)
        self.message = message
        if phase is not None:
            self.phase = phase

    def __str__(self):
        return self.message

class LexicalError(CompileError):
    phase = "Lexical"

class ParseError(CompileError):
    phase = "Syntax"

class InternalCompilerError(CompileError):
    phase = "Internal"

# =====================================================
# LEXER
# =====================================================
Token = namedtuple('Token', ['type', 'value'])

class Lexer:
    OPERATORS = '+-*/()'
    token_specification = [
        ("NUMBER",    r'[0-9][0-9.]*|\.[0-9][0-9.]*'),  # dots checked below
        ("IDENT",     r'[A-Za-z][A-Za-z0-9]*'),
        ("OPERATOR",  r'[+\-*/()]'),
        ("SKIP",      r'\s+'),
        ("MISMATCH",  r'.'),
    ]
    tok_regex = '|'.join(f'(?P<{n}>{p})' for n, p in token_specification)
    master_re = re.compile(tok_regex, re.DOTALL)

    def __init__(self, text):
        self.text = text
        self.tokens = []
        self._tokenize()

    def _tokenize(self):
        for mo in self.master_re.finditer(self.text):
            kind = mo.lastgroup
            val = mo.group()
            if kind == "NUMBER":
                if val.count('.') > 1:
                    raise LexicalError("Invalid number format: multiple dots")
                self.tokens.append(Token('NUMBER', val))
            elif kind == "IDENT":
                self.tokens.append(Token('IDENT', val))
            elif kind == "OPERATOR":
                self.tokens.append(Token('OPERATOR', val))
            elif kind == "SKIP":
                pass
            else:
                raise LexicalError(f"Invalid character: {val!r} at position {mo.start() + 1}")

    def peek_all(self):
        return list(self.tokens)

def tokenize(text):
    return Lexer(text).peek_all()

def format_tokens(tokens):
    """Render tokens one per line as ``TYPE     value``."""
    return "\n".join(f"{tok.type.ljust(8)} {tok.value}" for tok in tokens)

# =====================================================
# AST NODES
# =====================================================
class Node:
    def __repr__(self):
        fields = ", ".join(f"{k}={v!r}" for k, v in vars(self).items())
        return f"{type(self).__name__}({fields})"

    def __eq__(self, other):
        return type(self) is type(other) and vars(self) == vars(other)

class Number(Node):
    def __init__(self, value):
        self.value = value  # source text, never converted

class Variable(Node):
    def __init__(self, name):
        self.name = name

class BinaryOp(Node):
    def __init__(self, op, left, right):
        self.op = op
        self.left = left
        self.right = right

class UnaryOp(Node):
    def __init__(self, op, operand):
        self.op = op
        self.operand = operand

def ast_to_dict(node):
    """
    Serialize AST to dict recursively
    """
    if node is None:
        return None
    if isinstance(node, BinaryOp):
        return {"type": "BinaryOp", "operator": node.op,
                "left": ast_to_dict(node.left), "right": ast_to_dict(node.right)}
    if isinstance(node, UnaryOp):
        return {"type": "UnaryOp", "operator": node.op, "operand": ast_to_dict(node.operand)}
    if isinstance(node, Number):
        return {"type": "Number", "value": node.value}
    if isinstance(node, Variable):
        return {"type": "Variable", "name": node.name}
    raise InternalCompilerError(f"Unknown node type {type(node).__name__}")

# =====================================================
# PARSER (recursive-descent)
# =====================================================
EOF = Token('EOF', '')

class Parser:
    def __init__(self, tokens):
        self.tokens = tokens
        self.pos = 0

    def peek(self):
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return EOF

    def advance(self):
        tok = self.peek()
        self.pos += 1
        return tok

    def at_operator(self, ops):
        tok = self.peek()
        return tok.type == 'OPERATOR' and tok.value in ops

    def expect(self, ttype, value):
        tok = self.peek()
        if tok.type == ttype and tok.value == value:
            return self.advance()
        raise ParseError(f"Expected {ttype} '{value}' but got {tok.type}")

    def parse(self):
        node = self.expression()
        if self.pos != len(self.tokens):
            tok = self.peek()
            raise ParseError(f"Extra tokens after expression: {tok.type} '{tok.value}'")
        return node

    # Precedence climbing via separate functions
    def expression(self):
        node = self.term()
        while self.at_operator(('+', '-')):
            op = self.advance().value
            right = self.term()
            node = BinaryOp(op, node, right)
        return node

    def term(self):
        node = self.factor()
        while self.at_operator(('*', '/')):
            op = self.advance().value
            right = self.factor()
            node = BinaryOp(op, node, right)
        return node

    def factor(self):
        tok = self.peek()
        if tok is EOF:
            raise ParseError("Unexpected end of input")
        if tok.type == 'NUMBER':
            self.advance()
            return Number(tok.value)
        if tok.type == 'IDENT':
            self.advance()
            return Variable(tok.value)
        if self.at_operator('('):
            self.advance()
            node = self.expression()
            self.expect('OPERATOR', ')')
            return node
        if self.at_operator('-'):
            self.advance()
            return UnaryOp('-', self.factor())
        raise ParseError(f"Unexpected token: {tok.type} '{tok.value}'")

def parse(tokens):
    return Parser(tokens).parse()

# =====================================================
# TREE PRINTER
# =====================================================
def print_tree(node, indent=0):
    if node is None:
        return ""
    prefix = "  " * indent
    if isinstance(node, BinaryOp):
        return (f"{prefix}{node.op}\n"
                + print_tree(node.left, indent + 1)
                + print_tree(node.right, indent + 1))
    if isinstance(node, UnaryOp):
        return f"{prefix}{node.op} (unary)\n" + print_tree(node.operand, indent + 1)
    if isinstance(node, Number):
        return f"{prefix}{node.value}\n"
    if isinstance(node, Variable):
        return f"{prefix}{node.name}\n"
    return ""

# =====================================================
# SEMANTIC ANALYZER
# =====================================================
class SemanticReport:
    def __init__(self, node_count, variables, constants, operators):
        self.node_count = node_count
        self.variables = variables
        self.constants = constants
        self.operators = operators

    @property
    def classification(self):
        return 'symbolic' if self.variables else 'numeric'

    def to_text(self):
        def listing(items):
            return ", ".join(items) if items else "(none)"

        lines = [
            f"Total nodes     : {self.node_count}",
            f"Variables       : {listing(self.variables)}",
            f"Constants       : {listing(self.constants)}",
            f"Operators       : {listing(self.operators)}",
            f"Classification  : {self.classification}",
        ]
        if self.variables:
            lines.append(f"Warning: unresolved variables {listing(self.variables)} "
                         f"require runtime values")
        else:
            lines.append("Expression is fully evaluable at compile time")
        return "\n".join(lines)

class SemanticAnalyzer:
    def __init__(self):
        # dict keeps first-seen order of distinct names
        self.variables = {}
        self.constants = []
        self.operators = []
        self.node_count = 0

    def analyze(self, node):
        self.visit(node)
        return SemanticReport(self.node_count, list(self.variables),
                              list(self.constants), list(self.operators))

    def visit(self, node):
        if node is None:
            return
        self.node_count += 1
        if isinstance(node, Variable):
            self.variables.setdefault(node.name, None)
        elif isinstance(node, Number):
            self.constants.append(node.value)
        elif isinstance(node, BinaryOp):
            self.operators.append(node.op)
            self.visit(node.left)
            self.visit(node.right)
        elif isinstance(node, UnaryOp):
            self.operators.append(f"unary {node.op}")
            self.visit(node.operand)
        else:
            raise InternalCompilerError(f"Unknown node type {type(node).__name__}")

def analyze(node):
    return SemanticAnalyzer().analyze(node)

# =====================================================
# IR (TAC) GENERATION
# =====================================================
class TACInstruction:
    def __init__(self, op, dest, arg1, arg2=None):
        self.op = op
        self.dest = dest
        self.arg1 = arg1
        self.arg2 = arg2

    def __repr__(self):
        if self.op == 'assign':
            return f"{self.dest} = {self.arg1}"
        if self.op == 'neg':
            return f"{self.dest} = -{self.arg1}"
        return f"{self.dest} = {self.arg1} {self.op} {self.arg2}"

class IRGenerator:
    def __init__(self):
        self.tac = []
        self.temp_count = 0

    def new_temp(self):
        name = f"t{self.temp_count}"
        self.temp_count += 1
        return name

    def gen(self, node):
        ref = self.gen_expr(node)
        self.tac.append(TACInstruction('assign', 'result', ref))
        return self.tac

    def gen_expr(self, expr):
        if isinstance(expr, Number):
            return expr.value
        if isinstance(expr, Variable):
            return expr.name
        if isinstance(expr, UnaryOp):
            t = self.gen_expr(expr.operand)
            dest = self.new_temp()
            self.tac.append(TACInstruction('neg', dest, t))
            return dest
        if isinstance(expr, BinaryOp):
            a = self.gen_expr(expr.left)
            b = self.gen_expr(expr.right)
            dest = self.new_temp()
            self.tac.append(TACInstruction(expr.op, dest, a, b))
            return dest
        raise InternalCompilerError("Unknown node type in TAC generation")

def generate_tac(node):
    return [repr(t) for t in IRGenerator().gen(node)]

# =====================================================
# PSEUDO-ASSEMBLY EMISSION
# =====================================================
NO_OPERATIONS = "(single value - no operations)"

def tac_to_assembly(tac_lines):
    asm = []
    for line in tac_lines:
        target, sep, expr = line.partition(" = ")
        if not sep:
            continue
        asm.append(f"MOV {target.strip()}, {expr.strip()}")
    return asm

def generate_final_code(tac_lines):
    # only the closing "result = x" copy means nothing was computed
    if len(tac_lines) <= 1:
        return NO_OPERATIONS
    return "\n".join(tac_to_assembly(tac_lines)) or NO_OPERATIONS

# =====================================================
# COMPILER DRIVER
# =====================================================
def empty_result():
    return {
        'tokens': [],
        'ast': None,
        'syntax_tree': '',
        'semantic': None,
        'tac': [],
        'asm': '',
        'error': None,
    }

def compile_source(expression):
    """Run every phase on ``expression``.

    Returns a result dict; on failure only ``error`` is set.
    """
    result = empty_result()
    try:
        toks = tokenize(expression)
        ast = parse(toks)
        syntax_tree = print_tree(ast).strip() or "(empty tree)"
        semantic = analyze(ast)
        tac = generate_tac(ast)
        asm = generate_final_code(tac)
    except RecursionError:
        result['error'] = "Expression nested too deeply"
        log.debug("compile %r failed: nesting too deep", expression)
        return result
    except CompileError as e:
        result['error'] = str(e)
        log.debug("compile %r failed in %s phase: %s", expression, e.phase, e)
        return result

    log.debug("compiled %r into %d TAC instructions", expression, len(tac))
    result.update(tokens=toks, ast=ast, syntax_tree=syntax_tree,
                  semantic=semantic, tac=tac, asm=asm)
    return result

# =====================================================
# COMMAND LINE
# =====================================================
TEST_EXPRESSION = "(a + 2.5) * -b / 4"

def main(argv=None):
    args = sys.argv[1:] if argv is None else argv
    expression = " ".join(args) or TEST_EXPRESSION
    result = compile_source(expression)
    if result['error']:
        print(f"error: {result['error']}", file=sys.stderr)
        return 1

    sections = [
        ("Lexical Analysis", format_tokens(result['tokens'])),
        ("Syntax Tree", result['syntax_tree']),
        ("Semantic Analysis", result['semantic'].to_text()),
        ("Intermediate Code (TAC)", "\n".join(result['tac'])),
        ("Final Code", result['asm']),
    ]
    print(f"Expression: {expression}")
    for title, body in sections:
        print(f"\n=== {title} ===")
        print(body)
    return 0

if __name__ == '__main__':
    sys.exit(main())
