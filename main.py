from time import sleep, perf_counter
from itertools import count as counter

from lazy import generate, iterate
from utils import InvocationCounter, evaluation_depth


def expensive_transform(x):
    # Simulate a costly step so laziness is visible
    print(f"  computing f({x}) ...")
    sleep(0.2)
    return x * x

print("\n--- Demo: laziness (no work until a terminal operation) ---")
naturals = iterate(1, lambda x: x + 1)  # infinite source
pipeline = (
    naturals
    .map(expensive_transform)   # expensive; watch when it runs
    .limit(5)
)
print("Constructed pipeline. Only the first mapped head is known to exist:", pipeline)

print("\nMaterializing (computes exactly 5 squares):")
t0 = perf_counter()
out = pipeline.to_list()
t1 = perf_counter()
print(f"Result: {out}")
print(f"Time: {t1 - t0:.2f}s")
print(f"Rendered after evaluation: {pipeline}\n")

print("--- Demo: memoization (second pass reuses cached heads) ---")
t0 = perf_counter()
again = pipeline.to_list()
t1 = perf_counter()
print(f"Second pass: {again}. Time: {t1 - t0:.4f}s\n")

print("--- Demo: filtering an infinite source ---")
evens = naturals.filter(lambda x: x % 2 == 0)
print("First three evens:", evens.limit(3).to_list())
print("Evens below 10:", evens.take_while(lambda x: x < 10).to_list())
print("First even above 100:", evens.find_first(lambda x: x > 100))
print(f"Nodes of the source evaluated so far: {evaluation_depth(naturals)}\n")

print("--- Demo: generate calls its supplier once per node ---")
ticket = counter(1)
supplier = InvocationCounter(lambda: next(ticket))
tickets = generate(supplier)
print("Head twice:", tickets.head(), tickets.head(), f"(supplier calls: {supplier.calls})")
print("Five tickets:", tickets.limit(5).to_list(), f"(supplier calls: {supplier.calls})\n")

print("--- Demo: reduce and zip_with ---")
print("Sum of first 10 odds:",
      naturals.filter(lambda x: x % 2 == 1).limit(10).reduce(0, lambda acc, x: acc + x))
labels = iterate("a", lambda s: chr(ord(s) + 1))
print("Zipped:", naturals.zip_with(labels, lambda n, s: f"{s}{n}").limit(4).to_list())
