#!/usr/bin/env python3

# -*- coding: utf-8; -*-

import argparse;
import json;
import multiprocessing as mp;
import sys;

import codec.amr;
import consolidate;
import mentions;
import validate.core;
from corpus import CoreferenceChain, Meaning;

ENCODING = "utf-8";
VALIDATIONS = validate.core.VALIDATIONS;

def read_graphs(stream, keep_inverse = False, keep_relation_alignments = False,
                cores = 1, n = None, trace = 0, quiet = False):
  graphs = list(codec.amr.read(stream, keep_inverse = keep_inverse,
                               keep_relation_alignments
                               = keep_relation_alignments,
                               cores = cores, n = n,
                               trace = trace, quiet = quiet));
  if trace:
    print("read_graphs(): {} graphs.".format(len(graphs)), file = sys.stderr);
  return graphs;

def read_dictionary(stream, quiet = False):
  #
  # one candidate meaning per line: mention, reference, label, weight, and an
  # optional flag for named entities; mentions match case-insensitively.
  #
  entries = dict();
  meanings = dict();
  for i, line in enumerate(stream):
    line = line.rstrip("\n");
    if len(line) == 0 or line.startswith("#"): continue;
    fields = line.split("\t");
    try:
      form, reference, label, weight = fields[:4];
      weight = float(weight);
    except ValueError:
      if not quiet:
        print("read_dictionary(): ignoring line {}: {}"
              "".format(i + 1, line), file = sys.stderr);
      continue;
    ne = len(fields) > 4 and fields[4].lower() in {"1", "true", "ne", "yes"};
    meaning = meanings.get(reference);
    if meaning is None:
      meaning = meanings[reference] = Meaning(reference, label, ne);
    entries.setdefault(form.lower(), []).append((meaning, weight));

  def lookup(mention):
    result = [];
    for form in (mention.surface, mention.lemma):
      for meaning, weight in entries.get(form.lower() if form else None, []):
        if all(meaning != other for other, _ in result):
          result.append((meaning, weight));
    return result;

  return lookup;

def read_chains(stream):
  #
  # one chain per line, members (tab-separated) written as sentence and
  # variable, e.g. 's1/b', which is how they are named once qualified
  #
  chains = [];
  for line in stream:
    members = [member.strip() for member in line.split("\t")
               if member.strip()];
    if not members: continue;
    chains.append(["_".join(member.split("/", maxsplit = 1))
                   for member in members]);

  def coreference(graphs):
    vertices = {id for graph in graphs for id in graph.nodes};
    return [CoreferenceChain(vertices = [vertex for vertex in chain
                                         if vertex in vertices])
            for chain in chains];

  return coreference;

def read_annotations(stream, quiet = False):
  annotations = dict();
  for i, line in enumerate(stream):
    fields = line.rstrip("\n").split("\t");
    if len(fields) < 3:
      if line.strip() and not quiet:
        print("read_annotations(): ignoring line {}: {}"
              "".format(i + 1, line.rstrip("\n")), file = sys.stderr);
      continue;
    fields += [None] * (5 - len(fields));
    id, index, lemma, pos, ne = fields[:5];
    try:
      index = int(index);
    except ValueError:
      if not quiet:
        print("read_annotations(): ignoring line {}: {}"
              "".format(i + 1, line.rstrip("\n")), file = sys.stderr);
      continue;
    annotations.setdefault(id, []).append((index, lemma, pos, ne));

  def annotate(graph):
    for index, lemma, pos, ne in annotations.get(graph.id, []):
      if 0 <= index < len(graph.alignments.tokens):
        graph.alignments.annotate(index, lemma = lemma or None,
                                  pos = pos, ne = ne);

  return annotate;

def write_text(graph, stream):
  for id in sorted(graph.nodes):
    meaning = graph.meaning(id);
    print("{}\t{}\t{}\t{}"
          "".format(id, meaning.reference if meaning else "",
                    "/".join(sorted(graph.types.get(id, ()))),
                    " | ".join(sorted(mention.surface for mention
                                      in graph.mentions.get(id, ())))),
          file = stream);
  for edge in sorted(graph.edges):
    print("{}\t{}\t{}".format(edge.src, edge.lab, edge.tgt), file = stream);

def main():
  parser = argparse.ArgumentParser(description = "AMR Graph Consolidation");
  parser.add_argument("--keep-inverse", action = "store_true");
  parser.add_argument("--keep-relation-alignments", action = "store_true");
  parser.add_argument("--dictionary",
                      type = argparse.FileType("r", encoding = ENCODING));
  parser.add_argument("--chains",
                      type = argparse.FileType("r", encoding = ENCODING));
  parser.add_argument("--annotations",
                      type = argparse.FileType("r", encoding = ENCODING));
  parser.add_argument("--function-words",
                      type = argparse.FileType("r", encoding = ENCODING));
  parser.add_argument("--validate", action = "append", default = []);
  parser.add_argument("--write", default = "json");
  parser.add_argument("--cores", type = int, default = 1);
  parser.add_argument("--n", type = int);
  parser.add_argument("--quiet", action = "store_true");
  parser.add_argument("--trace", "-t", action = "count", default = 0);
  parser.add_argument("input", nargs = "?",
                      type = argparse.FileType("r", encoding = ENCODING),
                      default = sys.stdin);
  parser.add_argument("output", nargs = "?",
                      type = argparse.FileType("w", encoding = ENCODING),
                      default = sys.stdout);
  arguments = parser.parse_args();

  if arguments.write not in {"dot", "json", "txt"}:
    print("main.py(): invalid output format: {}; exit."
          "".format(arguments.write), file = sys.stderr);
    sys.exit(1);
  if arguments.validate == ["all"]:
    actions = VALIDATIONS;
  else:
    actions = set();
    for action in arguments.validate:
      if action in VALIDATIONS:
        actions.add(action);
      else:
        print("main.py(): invalid type of validation: {}; exit."
              "".format(action), file = sys.stderr);
        sys.exit(1);
  if arguments.quiet: arguments.trace = 0;
  if arguments.cores == 0: arguments.cores = mp.cpu_count();

  graphs = read_graphs(arguments.input,
                       keep_inverse = arguments.keep_inverse,
                       keep_relation_alignments
                       = arguments.keep_relation_alignments,
                       cores = arguments.cores, n = arguments.n,
                       trace = arguments.trace, quiet = arguments.quiet);
  if not graphs:
    print("main.py(): no graphs in {}; exit."
          "".format(arguments.input.name), file = sys.stderr);
    sys.exit(1);
  if actions:
    for graph in graphs:
      validate.core.test(graph, actions, stream = sys.stderr);

  lookup = read_dictionary(arguments.dictionary, quiet = arguments.quiet) \
    if arguments.dictionary else None;
  coreference = read_chains(arguments.chains) if arguments.chains else None;
  annotate = read_annotations(arguments.annotations, quiet = arguments.quiet) \
    if arguments.annotations else None;
  function_words = {line.strip().lower() for line in arguments.function_words
                    if line.strip()} if arguments.function_words else None;

  corpus = mentions.prepare(graphs, lookup = lookup,
                            coreference = coreference, annotate = annotate,
                            function_words = function_words,
                            trace = arguments.trace, quiet = arguments.quiet);
  graph = consolidate.create(corpus, trace = arguments.trace);
  if actions:
    validate.core.test(graph, actions, stream = sys.stderr);

  if arguments.write == "json":
    json.dump(graph.encode(), arguments.output, indent = None);
    print(file = arguments.output);
  elif arguments.write == "dot":
    graph.dot(arguments.output);
  elif arguments.write == "txt":
    write_text(graph, arguments.output);

if __name__ == "__main__":
  main();
