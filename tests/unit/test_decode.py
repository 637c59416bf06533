import unittest

from zdemangle.decode import parse
from zdemangle.error import MalformedInputError
from zdemangle.symbol import CxxObject, CxxParameter, SpecialKind

INT = CxxObject("int")


def names(objects) -> list:
    return [obj.name for obj in objects]


class TestParseObjects(unittest.TestCase):
    def test_simple_function(self) -> None:
        symbol = parse("_Z3fooi")
        self.assertEqual(names(symbol.objects), ["foo"])
        self.assertEqual(symbol.parameters, (CxxParameter((INT,)),))
        self.assertEqual(symbol.special_kind, SpecialKind.NONE)
        self.assertFalse(symbol.is_bare_type)

    def test_nested_name_with_void(self) -> None:
        symbol = parse("_ZN3Foo3BarEv")
        self.assertEqual(names(symbol.objects), ["Foo", "Bar"])
        self.assertEqual(symbol.parameters, ())

    def test_const_method(self) -> None:
        symbol = parse("_ZNK3Foo3getEv")
        self.assertTrue(symbol.is_const)

    def test_constructor(self) -> None:
        symbol = parse("_ZN3FooC1Ev")
        self.assertEqual(names(symbol.objects), ["Foo", "Foo"])
        self.assertTrue(symbol.is_constructor)
        self.assertFalse(symbol.is_destructor)

    def test_destructor(self) -> None:
        symbol = parse("_ZN3Foo3BarD2Ev")
        self.assertEqual(names(symbol.objects), ["Foo", "Bar", "~Bar"])
        self.assertTrue(symbol.is_destructor)
        self.assertFalse(symbol.is_constructor)

    def test_complex_is_not_a_constructor(self) -> None:
        symbol = parse("_Z3fooCd")
        self.assertFalse(symbol.is_constructor)
        self.assertEqual(
            symbol.parameters,
            (CxxParameter((CxxObject("double"),), is_complex=True),),
        )

    def test_template_arguments(self) -> None:
        symbol = parse("_ZN3FooIiE3barEv")
        self.assertEqual(names(symbol.objects), ["Foo", "bar"])
        self.assertEqual(symbol.objects[0].template_args, (CxxParameter((INT,)),))
        self.assertEqual(symbol.objects[1].template_args, ())

    def test_std_prefix(self) -> None:
        symbol = parse("_ZNSt6vectorIiE9push_backERKi")
        self.assertEqual(names(symbol.objects), ["std", "vector", "push_back"])
        self.assertEqual(
            symbol.parameters,
            (CxxParameter((INT,), is_const=True, indirection="&"),),
        )

    def test_chain_prefixes_are_tabled(self) -> None:
        symbol = parse("_ZN1a1b1c1dEv")
        a, b, c = (CxxObject(n) for n in "abc")
        self.assertEqual(symbol.substitutions, ((a, b), (a, b, c)))

    def test_template_args_tabled_before_prefixes(self) -> None:
        symbol = parse("_ZN1aIPiE1b1cEv")
        a_ptr = CxxObject("a", (CxxParameter((INT,), indirection="*"),))
        self.assertEqual(
            symbol.substitutions,
            (CxxParameter((INT,), indirection="*"), (a_ptr, CxxObject("b"))),
        )


class TestParseParameters(unittest.TestCase):
    def test_qualifiers(self) -> None:
        symbol = parse("_Z3fooPKcRi")
        char = CxxObject("char")
        self.assertEqual(
            symbol.parameters,
            (
                CxxParameter((char,), is_const=True, indirection="*"),
                CxxParameter((INT,), indirection="&"),
            ),
        )

    def test_nested_parameter(self) -> None:
        symbol = parse("_Z3fooN3Foo3BarEi")
        self.assertEqual(len(symbol.parameters), 2)
        self.assertEqual(names(symbol.parameters[0].type_chain), ["Foo", "Bar"])
        self.assertEqual(symbol.parameters[1], CxxParameter((INT,)))

    def test_std_parameter(self) -> None:
        symbol = parse("_Z3fooSt6vectorIiE")
        (param,) = symbol.parameters
        self.assertEqual(names(param.type_chain), ["std", "vector"])

    def test_substitution_by_index(self) -> None:
        symbol = parse("_Z3fooPKcS_S0_")
        char = CxxObject("char")
        self.assertEqual(
            symbol.parameters[1],
            CxxParameter((char,), is_const=True, indirection="*"),
        )
        self.assertEqual(
            symbol.parameters[2], CxxParameter((char,), is_const=True)
        )

    def test_substitution_keeps_own_qualifiers(self) -> None:
        symbol = parse("_Z3fooPiRS_")
        self.assertEqual(
            symbol.parameters[1], CxxParameter((INT,), indirection="&")
        )

    def test_substitution_of_enclosing_scope(self) -> None:
        symbol = parse("_ZN3Foo3BarERKS_")
        self.assertEqual(
            symbol.parameters,
            (CxxParameter((CxxObject("Foo"),), is_const=True, indirection="&"),),
        )

    def test_enclosing_scope_wins_over_table(self) -> None:
        symbol = parse("_ZN3Foo3BarEPiS_")
        self.assertEqual(symbol.parameters[1], CxxParameter((CxxObject("Foo"),)))

    def test_basic_type_is_not_tabled(self) -> None:
        # `int` never enters the table, so `S_` falls back to the scope
        symbol = parse("_ZN3Foo3BarEiS_")
        self.assertEqual(symbol.substitutions, ())
        self.assertEqual(symbol.parameters[1], CxxParameter((CxxObject("Foo"),)))

    def test_substitution_with_template_args(self) -> None:
        symbol = parse("_Z3fooPN3BarIiEES0_IcE")
        bar_char = CxxObject("Bar", (CxxParameter((CxxObject("char"),)),))
        self.assertEqual(symbol.parameters[1], CxxParameter((bar_char,)))

    def test_substitution_in_nested_name(self) -> None:
        symbol = parse("_ZN1a1b1cENS_1dE")
        self.assertEqual(names(symbol.parameters[0].type_chain), ["a", "d"])

    def test_digits_after_primitive_start_new_parameter(self) -> None:
        symbol = parse("_Z3fooi3Bar")
        self.assertEqual(
            symbol.parameters,
            (CxxParameter((INT,)), CxxParameter((CxxObject("Bar"),))),
        )


class TestParseSpecial(unittest.TestCase):
    def test_vtable(self) -> None:
        symbol = parse("_ZTV3Foo")
        self.assertEqual(symbol.special_kind, SpecialKind.VIRTUAL_TABLE)
        self.assertTrue(symbol.is_bare_type)
        self.assertEqual(symbol.parameters, ())

    def test_type_info(self) -> None:
        self.assertEqual(
            parse("_ZTI3Foo").special_kind, SpecialKind.TYPE_INFO_STRUCTURE
        )
        self.assertEqual(parse("_ZTS3Foo").special_kind, SpecialKind.TYPE_INFO_NAME)

    def test_type_info_ignores_trailing_input(self) -> None:
        symbol = parse("_ZTVN3Foo3BarE")
        self.assertEqual(names(symbol.objects), ["Foo", "Bar"])
        self.assertEqual(symbol.parameters, ())

    def test_thunk(self) -> None:
        symbol = parse("_ZThn16_N3Foo3barEi")
        self.assertTrue(symbol.is_thunk)
        self.assertEqual(symbol.thunk_offset, 16)
        self.assertEqual(symbol.parameters, (CxxParameter((INT,)),))


class TestParseErrors(unittest.TestCase):
    def test_missing_prefix(self) -> None:
        with self.assertRaises(MalformedInputError):
            parse("3fooi")

    def test_missing_name(self) -> None:
        with self.assertRaises(MalformedInputError):
            parse("_Z")

    def test_short_name(self) -> None:
        with self.assertRaises(MalformedInputError):
            parse("_Z5fooi")

    def test_forward_reference(self) -> None:
        with self.assertRaises(MalformedInputError):
            parse("_Z3fooPiS1_")

    def test_empty_table(self) -> None:
        with self.assertRaises(MalformedInputError):
            parse("_Z3fooiS_")

    def test_unknown_parameter(self) -> None:
        with self.assertRaises(MalformedInputError):
            parse("_Z3fooQ")

    def test_zero_length_name(self) -> None:
        with self.assertRaises(MalformedInputError):
            parse("_Z0i")

    def test_empty_template_arguments(self) -> None:
        with self.assertRaises(MalformedInputError):
            parse("_Z3fooIEv")

    def test_huge_name_length(self) -> None:
        with self.assertRaises(MalformedInputError):
            parse("_Z5000000000a")
        with self.assertRaises(MalformedInputError):
            parse("_Z999999999a")
        with self.assertRaises(MalformedInputError):
            parse("_Z" + "1" * 5000 + "a")

    def test_huge_numbers_in_parameters(self) -> None:
        with self.assertRaises(MalformedInputError):
            parse("_Z3fooN3Foo" + "9" * 20 + "aE")
        with self.assertRaises(MalformedInputError):
            parse("_Z3fooPiS" + "1" * 5000 + "_")
        with self.assertRaises(MalformedInputError):
            parse("_ZThn" + "8" * 5000 + "_3foov")

    def test_non_ascii_digits(self) -> None:
        with self.assertRaises(MalformedInputError):
            parse("_Z٣foo")

    def test_deep_template_nesting(self) -> None:
        with self.assertRaises(MalformedInputError):
            parse("_Z1a" + "I1a" * 400 + "E" * 400 + "v")

    def test_moderate_template_nesting(self) -> None:
        symbol = parse("_Z1a" + "I1a" * 10 + "E" * 10 + "v")
        depth = 0
        obj = symbol.objects[0]
        while obj.template_args:
            obj = obj.template_args[0].type_chain[0]
            depth += 1
        self.assertEqual(depth, 10)

    def test_deterministic(self) -> None:
        mangled = "_ZNSt6vectorIiE9push_backERKi"
        self.assertEqual(parse(mangled), parse(mangled))


if __name__ == "__main__":
    unittest.main()
