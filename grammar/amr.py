import re;

from grammar.core import FAILURE, Parser, rule;

#
# the character classes of the PENMAN grammar; a concept or relation stops at
# a tilde, which always introduces an alignment.
#
LOWER = re.compile(r"[a-z]");
DIGIT = re.compile(r"[0-9]");
SIGN = re.compile(r"[+-]");
BLANK = re.compile(r"[ \t]");
NEWLINE = re.compile(r"[\n\r]");
SPACE = re.compile(r"[ \t\n\r]");
BOUNDARY = re.compile(r"[ \t\n\r)~]");
CONCEPT = re.compile(r"[^) \t\n\r~]");
RELATION = re.compile(r"[^ \t\n\r~]");
ALIGNMENT = re.compile(r"[A-Za-z0-9.,]");
STRING = re.compile(r"[^\"\s]");
CONTENT = re.compile(r"[^\"\n\r]");

class AMR(Parser):

    def root(self):
        return self.ancestor();

    @rule
    def ancestor(self):
        start = self.offset;
        node = self.sequence(lambda: self.literal("("), self.os, self.binding,
                             lambda: self.optional(self.instance),
                             lambda: self.repeat(self.child),
                             self.os, lambda: self.literal(")"));
        if node is FAILURE: return FAILURE;
        return self.act("make_ancestor", start, node.elements);

    @rule
    def binding(self):
        start = self.offset;
        node = self.variable();
        if node is FAILURE: return FAILURE;
        return self.act("make_binding", start, [node]);

    @rule
    def instance(self):
        node = self.sequence(self.s, lambda: self.literal("/"), self.s,
                             self.aconcept);
        if node is FAILURE: return FAILURE;
        return node.elements[3];

    @rule
    def child(self):
        node = self.sequence(self.s, self.descendent);
        if node is FAILURE: return FAILURE;
        return node.elements[1];

    @rule
    def descendent(self):
        start = self.offset;
        node = self.sequence(self.relation,
                             lambda: self.optional(self.alignment),
                             self.s, self.y);
        if node is FAILURE: return FAILURE;
        return self.act("make_descendent", start, node.elements);

    @rule
    def relation(self):
        return self.sequence(lambda: self.literal(":"),
                             lambda: self.repeat(
                                 lambda: self.character(RELATION), 1));

    @rule
    def y(self):
        return self.choice(self.ancestor, self.anamedconst, self.avar,
                           self.astr, self.anum);

    @rule
    def avar(self):
        return self.aligned("make_var", self.variable);

    @rule
    def variable(self):
        return self.sequence(lambda: self.repeat(
                                 lambda: self.character(LOWER), 1),
                             lambda: self.repeat(
                                 lambda: self.character(DIGIT)));

    @rule
    def anamedconst(self):
        return self.aligned("make_constant", self.namedconst);

    @rule
    def namedconst(self):
        #
        # a bare word of at least two letters (e.g. 'imperative' or 'expressive')
        # or a lone polarity sign
        #
        return self.choice(
            lambda: self.sequence(
                lambda: self.character(LOWER),
                lambda: self.repeat(lambda: self.character(LOWER), 1),
                lambda: self.lookahead(lambda: self.character(BOUNDARY))),
            lambda: self.sequence(
                lambda: self.character(SIGN),
                lambda: self.lookahead(lambda: self.character(DIGIT),
                                       negate = True)));

    @rule
    def astr(self):
        return self.aligned("make_str", self.str);

    @rule
    def str(self):
        return self.sequence(
            lambda: self.literal("\""),
            lambda: self.optional(lambda: self.sequence(
                lambda: self.character(STRING),
                lambda: self.repeat(lambda: self.character(CONTENT)),
                lambda: self.optional(lambda: self.character(STRING)))),
            lambda: self.literal("\""));

    @rule
    def anum(self):
        return self.aligned("make_num", self.num);

    @rule
    def num(self):
        return self.sequence(
            lambda: self.optional(lambda: self.character(SIGN)),
            lambda: self.repeat(lambda: self.character(DIGIT), 1),
            lambda: self.optional(lambda: self.sequence(
                lambda: self.literal("."),
                lambda: self.repeat(lambda: self.character(DIGIT), 1))));

    @rule
    def aconcept(self):
        return self.aligned("make_concept", self.concept);

    @rule
    def concept(self):
        return self.repeat(lambda: self.character(CONCEPT), 1);

    @rule
    def alignment(self):
        start = self.offset;
        node = self.sequence(lambda: self.literal("~"),
                             lambda: self.repeat(
                                 lambda: self.character(ALIGNMENT), 1));
        if node is FAILURE: return FAILURE;
        return self.act("make_alignment", start, node.elements);

    @rule
    def s(self):
        return self.choice(
            lambda: self.sequence(
                lambda: self.repeat(lambda: self.character(BLANK)),
                lambda: self.character(NEWLINE),
                lambda: self.repeat(lambda: self.character(BLANK))),
            lambda: self.repeat(lambda: self.character(BLANK), 1));

    @rule
    def os(self):
        return self.sequence(
            lambda: self.repeat(lambda: self.character(BLANK)),
            lambda: self.optional(lambda: self.character(NEWLINE)),
            lambda: self.repeat(lambda: self.character(BLANK)));

    def aligned(self, action, body):
        start = self.offset;
        node = self.sequence(body, lambda: self.optional(self.alignment));
        if node is FAILURE: return FAILURE;
        return self.act(action, start, node.elements);

def parse(input, actions = None, memoize = True):
    return AMR(input, actions, memoize).parse();
