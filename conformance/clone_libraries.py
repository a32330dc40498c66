"""Deep-cloning libraries

One conformance class per cloning strategy; each nested class is a suite.
Run with ``libcompare run`` or
``pytest -p libcompare.pytest_plugin --compare-report conformance/clone_libraries.py``.
"""

from libcompare.conformance.cloners import LIBRARIES
from libcompare.conformance.suite import clone_library_suite

_deepcopy, _copy, _pickle, _marshal, _json, _yaml = LIBRARIES

TestDeepcopy = clone_library_suite(_deepcopy.label, _deepcopy.cloner)
TestShallowCopy = clone_library_suite(_copy.label, _copy.cloner)
TestPickle = clone_library_suite(_pickle.label, _pickle.cloner)
TestMarshal = clone_library_suite(_marshal.label, _marshal.cloner)
TestJson = clone_library_suite(_json.label, _json.cloner)
TestYaml = clone_library_suite(_yaml.label, _yaml.cloner)
