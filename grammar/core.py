import collections;
import functools;

#
# generic parse-tree nodes built by the engine itself: a single matched token
# and a sequence of sub-nodes (sequences, repetitions, lookaheads).  semantic
# actions are free to return nodes of their own kinds instead.
#
Terminal = collections.namedtuple("Terminal", ["text", "offset"]);
Sequence = collections.namedtuple("Sequence", ["text", "offset", "elements"]);

class Failure(object):

    def __repr__(self):
        return "<FAILURE>";

    def __bool__(self):
        return False;

FAILURE = Failure();

class ParseError(Exception):

    def __init__(self, message, offset = None, line = None, column = None,
                 expected = None):
        super().__init__(message);
        self.offset = offset;
        self.line = line;
        self.column = column;
        self.expected = expected;

    @staticmethod
    def failure(input, offset, expected):
        line = input.count("\n", 0, offset) + 1;
        start = input.rfind("\n", 0, offset) + 1;
        end = input.find("\n", offset);
        if end < 0: end = len(input);
        column = offset - start + 1;
        expected = sorted(set(expected));
        message = "Line {}, column {}: expected {}\n{}\n{}^" \
                  "".format(line, column, ", ".join(expected),
                            input[start:end], " " * (offset - start));
        return ParseError(message, offset, line, column, expected);

def rule(method):
    #
    # wrap a grammar method into a named, memoized rule; the memo key is the
    # pair of rule name and input offset.
    #
    name = method.__name__;

    @functools.wraps(method)
    def apply(self):
        return self.apply_rule(name, method);
    return apply;

class Parser(object):

    def __init__(self, input, actions = None, memoize = True):
        self.input = input;
        self.size = len(input);
        self.actions = actions;
        self.memoize = memoize;
        self.offset = 0;
        self.failure = 0;
        self.expected = [];
        self.cache = dict();

    def root(self):
        raise NotImplementedError("Parser.root(): no start rule.");

    def parse(self):
        tree = self.root();
        if tree is not FAILURE and self.offset == self.size:
            return tree;
        if tree is not FAILURE or not self.expected:
            self.fail("<EOF>");
        raise ParseError.failure(self.input, self.failure, self.expected);

    def apply_rule(self, name, body):
        key = (name, self.offset);
        if self.memoize and key in self.cache:
            node, self.offset = self.cache[key];
            return node;
        start = self.offset;
        node = body(self);
        if node is FAILURE: self.offset = start;
        if self.memoize: self.cache[key] = (node, self.offset);
        return node;

    def act(self, name, start, elements):
        #
        # without actions, rules that would trigger one still yield a plain
        # sequence over their elements
        #
        if self.actions is None:
            return Sequence(self.input[start:self.offset], start, elements);
        return getattr(self.actions, name)(self.input, start, self.offset,
                                           elements);

    def fail(self, description):
        if self.offset > self.failure:
            self.failure = self.offset;
            self.expected = [];
        if self.offset == self.failure:
            self.expected.append(description);
        return FAILURE;

    def literal(self, string):
        if self.input.startswith(string, self.offset):
            node = Terminal(string, self.offset);
            self.offset += len(string);
            return node;
        return self.fail("\"{}\"".format(string));

    def character(self, pattern):
        if self.offset < self.size \
           and pattern.match(self.input, self.offset) is not None:
            node = Terminal(self.input[self.offset], self.offset);
            self.offset += 1;
            return node;
        return self.fail(pattern.pattern);

    def sequence(self, *parts):
        start = self.offset;
        elements = [];
        for part in parts:
            node = part();
            if node is FAILURE:
                self.offset = start;
                return FAILURE;
            elements.append(node);
        return Sequence(self.input[start:self.offset], start, elements);

    def choice(self, *alternatives):
        start = self.offset;
        for alternative in alternatives:
            self.offset = start;
            node = alternative();
            if node is not FAILURE: return node;
        self.offset = start;
        return FAILURE;

    def repeat(self, part, minimum = 0, maximum = None):
        start = self.offset;
        elements = [];
        while maximum is None or len(elements) < maximum:
            before = self.offset;
            node = part();
            if node is FAILURE: break;
            elements.append(node);
            #
            # a sub-rule that succeeds without consuming input would match
            # forever; one empty match is all we take.
            #
            if self.offset == before: break;
        if len(elements) < minimum:
            self.offset = start;
            return FAILURE;
        return Sequence(self.input[start:self.offset], start, elements);

    def optional(self, part):
        start = self.offset;
        node = part();
        if node is FAILURE:
            self.offset = start;
            return Terminal("", start);
        return node;

    def lookahead(self, part, negate = False):
        start = self.offset;
        node = part();
        self.offset = start;
        if (node is FAILURE) == negate:
            return Terminal("", start);
        return FAILURE;
