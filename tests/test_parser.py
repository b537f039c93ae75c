"""
Tests for the declaration parser.
"""

import pytest

from unity_style_checker.errors import StructureError
from unity_style_checker.lexer import tokenize
from unity_style_checker.parser import DeclarationKind, parse_declarations


def parse(text, path="Sample.cs"):
    return parse_declarations(tokenize(text), path)


def find(root, name):
    return next(d for d in root.walk() if d.name == name)


class TestContainers:
    """Namespaces and types."""

    def test_block_namespace(self):
        root = parse("namespace Game.Actors\n{\n    public class Player : MonoBehaviour { }\n}\n")
        ns = root.children[0]
        assert ns.kind == DeclarationKind.NAMESPACE
        assert ns.name == "Game.Actors"
        assert ns.children[0].name == "Player"
        assert ns.children[0].base_types == ("MonoBehaviour",)

    def test_file_scoped_namespace(self):
        root = parse("namespace Game;\npublic class A { }\npublic class B { }\n")
        ns = root.children[0]
        assert [c.name for c in ns.children] == ["A", "B"]

    def test_root_is_file(self):
        root = parse("class A { }", path="Assets/Scripts/Enemy.cs")
        assert root.kind == DeclarationKind.FILE
        assert root.name == "Enemy"

    def test_generic_bases_stop_at_where(self):
        root = parse("public class Pool<T> : MonoBehaviour, IPool where T : Component { }")
        assert find(root, "Pool").base_types == ("MonoBehaviour", "IPool")

    def test_nested_types_and_parent(self):
        root = parse("class Outer { struct Inner { int x; } }")
        inner = find(root, "Inner")
        assert inner.kind == DeclarationKind.STRUCT
        assert inner.parent is find(root, "Outer")
        assert find(root, "x").parent is inner

    def test_enum_members(self):
        root = parse("public enum State { Idle, Running = 2, [Obsolete] Dead, }")
        state = find(root, "State")
        assert [(c.kind, c.name) for c in state.children] == [
            (DeclarationKind.ENUM_MEMBER, "Idle"),
            (DeclarationKind.ENUM_MEMBER, "Running"),
            (DeclarationKind.ENUM_MEMBER, "Dead"),
        ]

    def test_interface_members(self):
        root = parse("public interface IPool { void Return(); int Count { get; } }")
        pool = find(root, "IPool")
        assert pool.kind == DeclarationKind.INTERFACE
        assert [(c.kind, c.name) for c in pool.children] == [
            (DeclarationKind.METHOD, "Return"),
            (DeclarationKind.PROPERTY, "Count"),
        ]

    @pytest.mark.parametrize("text,kind", [
        ("public record Point(int X, int Y);", DeclarationKind.CLASS),
        ("public record struct Point(int X);", DeclarationKind.STRUCT),
    ])
    def test_records(self, text, kind):
        root = parse(text)
        assert find(root, "Point").kind == kind

    def test_using_directives_are_not_declarations(self):
        root = parse("using System;\nusing UnityEngine;\nclass A { }\n")
        assert [c.name for c in root.children] == ["A"]


class TestMembers:
    """Fields, properties, methods and friends."""

    def test_multiple_declarators(self):
        root = parse("class A { private int a, b = 2, c; }")
        fields = find(root, "A").children
        assert [f.name for f in fields] == ["a", "b", "c"]
        assert all(f.kind == DeclarationKind.FIELD for f in fields)
        assert all(f.modifiers == frozenset({"private"}) and f.type_name == "int" for f in fields)

    def test_generic_method_with_constraint(self):
        root = parse("class A { public T Get<T>(int id) where T : Component { return null; } }")
        method = find(root, "Get")
        assert method.kind == DeclarationKind.METHOD
        assert method.type_name == "T"

    @pytest.mark.parametrize("member", [
        "public int Health => _health;",
        "public int Max { get; set; } = 10;",
        "public int Level { get { return 1; } }",
    ])
    def test_property_forms(self, member):
        root = parse("class A { " + member + " int after; }")
        kinds = [c.kind for c in find(root, "A").children]
        assert kinds == [DeclarationKind.PROPERTY, DeclarationKind.FIELD]

    def test_constructors(self):
        root = parse("class Player { public Player() { } static Player() { } ~Player() { } }")
        ctors = find(root, "Player").children
        assert [c.kind for c in ctors] == [DeclarationKind.CONSTRUCTOR] * 3
        assert [c.special for c in ctors] == [None, "static-constructor", "destructor"]

    def test_operator(self):
        root = parse("struct V { public static V operator +(V a, V b) => a; }")
        op = find(root, "V").children[0]
        assert op.special == "operator"
        assert op.name == "operator +"

    def test_indexer(self):
        root = parse("class A { public int this[int i] { get { return 0; } } }")
        indexer = find(root, "A").children[0]
        assert (indexer.kind, indexer.name, indexer.special) == (DeclarationKind.PROPERTY, "this", "indexer")

    def test_explicit_interface_method(self):
        root = parse("class A : IPool { void IPool.Return() { } }")
        method = find(root, "Return")
        assert method.special == "explicit-interface"

    def test_delegate(self):
        root = parse("public delegate void Hit(int damage);")
        hit = root.children[0]
        assert (hit.kind, hit.name, hit.type_name) == (DeclarationKind.DELEGATE, "Hit", "void")

    def test_events(self):
        root = parse("class A { public event Action OnDeath; public event Action Changed { add { } remove { } } }")
        events = find(root, "A").children
        assert [(e.kind, e.name) for e in events] == [
            (DeclarationKind.EVENT, "OnDeath"),
            (DeclarationKind.EVENT, "Changed"),
        ]

    def test_verbatim_identifier_name(self):
        root = parse("class A { private int @class; }")
        assert find(root, "A").children[0].name == "class"

    def test_access_keeps_source_order(self):
        root = parse("class A { protected internal int x; }")
        assert find(root, "x").access == "protected internal"


class TestAttributesAndComments:

    def test_attribute_arguments(self):
        root = parse("class A { [SerializeField, Range(0, 10)] private float _speed; }")
        field = find(root, "_speed")
        assert [(a.name, a.arguments) for a in field.attributes] == [("SerializeField", ""), ("Range", "0,10")]
        assert field.has_attribute("SerializeField")

    def test_attribute_short_name(self):
        root = parse("class A { [UnityEngine.SerializeFieldAttribute] int x; }")
        assert find(root, "x").has_attribute("SerializeField")

    def test_doc_comment_attaches_to_next_declaration(self):
        root = parse(
            "class A\n{\n"
            "    /// <summary>Runs.</summary>\n"
            "    public void Run() { } // trailing\n"
            "    private int x;\n"
            "}\n"
        )
        assert find(root, "Run").doc_comment == "/// <summary>Runs.</summary>"
        assert find(root, "x").leading_comments == ()

    def test_doc_comment_before_attributes(self):
        root = parse("class A\n{\n    /// doc\n    [SerializeField]\n    public int x;\n}\n")
        assert find(root, "x").doc_comment == "/// doc"


class TestPositions:

    def test_name_span(self):
        root = parse("class A\n{\n    private int myField = 0;\n}\n")
        field = find(root, "myField")
        assert (field.name_span.line, field.name_span.column) == (3, 17)
        assert (field.span.line, field.span.column) == (3, 5)


class TestStructureErrors:

    def test_unclosed_brace(self):
        with pytest.raises(StructureError) as info:
            parse("class A {\n")
        assert (info.value.line, info.value.column) == (1, 9)

    def test_mismatched_bracket(self):
        with pytest.raises(StructureError) as info:
            parse("class A { void F( } }")
        assert "does not match" in info.value.message

    def test_unexpected_closer(self):
        with pytest.raises(StructureError) as info:
            parse("}")
        assert info.value.message == "unexpected '}'"
