from guidelint_syntax import ASTWalker, CFamilyParser, CPatterns


def first_function(code):
    result = CFamilyParser().parse_string(code)
    func_nodes = ASTWalker.find_all_by_type(result.tree.root_node, "function_definition")
    assert len(func_nodes) == 1
    return func_nodes[0], result.source


def test_get_function_name():
    func, source = first_function("int ComputeTotal(int a) { return a; }")

    assert CPatterns.get_function_name(func, source) == "ComputeTotal"


def test_get_function_name_through_pointer_return():
    func, source = first_function("char **MakeNames(void) { return 0; }")

    assert CPatterns.get_function_name(func, source) == "MakeNames"


def test_is_static():
    func, source = first_function("static int helper(void) { return 1; }")
    assert CPatterns.is_static(func, source) is True

    func, source = first_function("int Helper(void) { return 1; }")
    assert CPatterns.is_static(func, source) is False


def test_body_line_count():
    func, _ = first_function("int Foo(void) {\n  a();\n  b();\n}\n")

    assert CPatterns.body_line_count(func) == 2


def test_has_leading_comment():
    func, _ = first_function("// Does things.\nint Foo(void) {\n}\n")
    assert CPatterns.has_leading_comment(func) is True

    func, _ = first_function("// Unrelated.\n\nint Foo(void) {\n}\n")
    assert CPatterns.has_leading_comment(func) is False

    func, _ = first_function("int Foo(void) {\n}\n")
    assert CPatterns.has_leading_comment(func) is False


def test_get_macro_name():
    result = CFamilyParser().parse_string("#define max_size 10\n#define SQUARE(x) ((x) * (x))\n")

    names = [
        ASTWalker.get_text(CPatterns.get_macro_name(node), result.source)
        for node in result.tree.root_node.children
        if CPatterns.get_macro_name(node) is not None
    ]
    assert names == ["max_size", "SQUARE"]


def test_get_position_counts_characters():
    func, source = first_function("/* é */ int Foo(void) {}")

    assert ASTWalker.get_position(func, source) == (1, 9)


def test_find_all_by_type_keeps_document_order():
    result = CFamilyParser().parse_string(
        "#define B 2\nint Foo(void) { return 1; }\n#define A(x) (x)\nint Bar(void) { return 2; }\n"
    )

    nodes = ASTWalker.find_all_by_type(
        result.tree.root_node, "preproc_def", "preproc_function_def", "function_definition"
    )
    assert [n.type for n in nodes] == [
        "preproc_def",
        "function_definition",
        "preproc_function_def",
        "function_definition",
    ]
    assert [n.start_point[0] for n in nodes] == [0, 1, 2, 3]


def test_parse_errors_are_reported_not_raised():
    result = CFamilyParser().parse_string("@interface Foo : NSObject\n@end\n")

    assert result.tree is not None
    assert result.errors
