""" Selection Tree: which fields a query requested at a given object """

from .tree import SelectionTree, Fragment, EMPTY_SELECTION
from .collect import selection_tree_from_info, selection_tree
