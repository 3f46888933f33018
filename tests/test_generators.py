"""Tests for the Java artifact generators."""

import javalang
import pytest

from springgen.artifacts import ArtifactKind, OutputRoot
from springgen.generators import (
    ControllerGenerator,
    EntityGenerator,
    RepositoryGenerator,
    ServiceGenerator,
)
from springgen.policy import ownership_of
from springgen.schema import FieldDef, Schema
from springgen.writer import ArtifactWriter


def parse(artifact):
    return javalang.parse.parse(artifact.content)


def by_name(artifacts):
    return {a.file_name: a for a in artifacts}


def method_names(type_decl):
    return [m.name for m in type_decl.methods]


@pytest.mark.parametrize("gen", [EntityGenerator, RepositoryGenerator, ServiceGenerator, ControllerGenerator])
def test_every_java_artifact_parses(gen, user_schema, product_schema):
    for schema in (user_schema, product_schema):
        for art in gen().build(schema):
            cu = parse(art)
            assert cu.package.name == art.package
            assert art.root is OutputRoot.MAIN
            assert art.target_path == art.package.replace(".", "/") + "/" + art.file_name


def test_build_is_deterministic(user_schema):
    gen = ServiceGenerator()
    assert [a.content for a in gen.build(user_schema)] == [a.content for a in gen.build(user_schema)]


def test_entity(user_schema):
    (art,) = EntityGenerator().build(user_schema)
    assert art.kind is ArtifactKind.BASE
    assert art.target_path == "com/example/User.java"
    assert ownership_of(art.content) == "generator"

    text = art.content
    assert '@Table(name = "users")' in text
    assert "@GeneratedValue(strategy = GenerationType.IDENTITY)" in text
    assert '@Column(name = "id", nullable = false)' in text
    assert '@Column(name = "username", nullable = true, length = 50)' in text
    assert "return Objects.hash(this.id, this.username, this.email, this.active);" in text
    assert '"User{" + "id=" + this.id + ", username=" + this.username' in text

    cls = parse(art).types[0]
    assert cls.name == "User"
    assert [f.declarators[0].name for f in cls.fields] == ["id", "username", "email", "active"]
    assert len(cls.constructors) == 1
    assert not cls.constructors[0].parameters
    assert method_names(cls) == [
        "getId", "setId",
        "getUsername", "setUsername",
        "getEmail", "setEmail",
        "getActive", "setActive",
        "equals", "hashCode", "toString",
    ]


def test_entity_with_table_override_and_imports(product_schema):
    (art,) = EntityGenerator().build(product_schema)
    assert art.target_path == "com/example/shop/Product.java"
    assert '@Table(name = "catalog_products")' in art.content
    assert "import java.math.BigDecimal;" in art.content
    assert "import java.time.LocalDate;" in art.content
    # String id: no generated identity
    assert "@GeneratedValue" not in art.content
    assert '@Column(name = "released_on", nullable = true)' in art.content


def test_composite_id_has_no_generated_value(schema_factory):
    (art,) = EntityGenerator().build(schema_factory(id_fields=("id", "email")))
    assert art.content.count("@Id\n") == 2
    assert "@GeneratedValue" not in art.content


def test_repository(user_schema):
    (art,) = RepositoryGenerator().build(user_schema)
    assert art.target_path == "com/example/repository/UserRepository.java"
    assert "import com.example.User;" in art.content
    iface = parse(art).types[0]
    assert iface.name == "UserRepository"
    assert iface.extends[0].name == "JpaRepository"
    assert "public interface UserRepository extends JpaRepository<User, Long>" in art.content
    assert method_names(iface) == [
        "findByUsername", "existsByUsername",
        "findByEmail", "existsByEmail",
        "findAllByActive",
    ]
    assert "Optional<User> findByEmail(String email);" in art.content
    assert "boolean existsByUsername(String username);" in art.content
    assert "List<User> findAllByActive(Boolean active);" in art.content


def test_repository_without_conventions(product_schema):
    (art,) = RepositoryGenerator().build(product_schema)
    assert "JpaRepository<Product, String>" in art.content
    assert parse(art).types[0].methods == []


def test_service_artifacts(user_schema):
    arts = ServiceGenerator().build(user_schema)
    assert [a.kind for a in arts] == [ArtifactKind.BASE, ArtifactKind.BASE, ArtifactKind.EXTENSIBLE]
    files = by_name(arts)
    assert set(files) == {"UserService.java", "BaseUserServiceImpl.java", "UserServiceImpl.java"}
    assert files["BaseUserServiceImpl.java"].target_path == "com/example/service/base/BaseUserServiceImpl.java"
    assert files["UserServiceImpl.java"].target_path == "com/example/service/UserServiceImpl.java"

    iface = parse(files["UserService.java"]).types[0]
    assert method_names(iface) == [
        "create", "findById", "findAll", "update", "deleteById",
        "findByUsername", "existsByUsername", "findByEmail", "existsByEmail",
    ]


def test_base_service_impl_update_is_a_merge(user_schema):
    base = by_name(ServiceGenerator().build(user_schema))["BaseUserServiceImpl.java"]
    text = base.content
    assert "public abstract class BaseUserServiceImpl implements UserService" in text
    assert "@Transactional(readOnly = true)\npublic abstract class" in text
    assert text.count("@Transactional(readOnly = false)") == 3
    assert '.orElseThrow(() -> new NoSuchElementException("User not found with id: " + id));' in text
    for prop in ("Username", "Email", "Active"):
        assert f"existing.set{prop}(user.get{prop}());" in text
    assert "existing.setId(" not in text
    assert "return userRepository.save(existing);" in text

    cls = parse(base).types[0]
    assert "abstract" in cls.modifiers
    assert cls.fields[0].declarators[0].name == "userRepository"


def test_extensible_service_impl(user_schema):
    impl = by_name(ServiceGenerator().build(user_schema))["UserServiceImpl.java"]
    assert ownership_of(impl.content) == "user"
    assert '@Service("defaultUserService")' in impl.content
    assert "import com.example.service.base.BaseUserServiceImpl;" in impl.content
    cls = parse(impl).types[0]
    assert cls.extends.name == "BaseUserServiceImpl"
    assert method_names(cls) == ["customBusinessLogic"]


def test_controllers(user_schema):
    arts = ControllerGenerator().build(user_schema)
    assert [a.kind for a in arts] == [ArtifactKind.BASE, ArtifactKind.EXTENSIBLE]
    base, ctrl = arts
    assert base.target_path == "com/example/controller/base/BaseUserController.java"
    assert ctrl.target_path == "com/example/controller/UserController.java"

    assert 'public static final String API_PATH = "/api/users";' in base.content
    assert '@RequestMapping("/api/default/users")' in ctrl.content
    assert "@RestController" in ctrl.content
    assert "@RestController" not in base.content

    base_cls = parse(base).types[0]
    assert method_names(base_cls) == ["getAllUsers", "getUserById", "createUser", "updateUser", "deleteUser"]
    assert "return ResponseEntity.status(HttpStatus.CREATED).body(created);" in base.content
    assert "return ResponseEntity.noContent().build();" in base.content
    assert "} catch (NoSuchElementException e) {" in base.content

    ctrl_cls = parse(ctrl).types[0]
    assert ctrl_cls.extends.name == "BaseUserController"
    assert method_names(ctrl_cls) == ["customEndpoint"]


def test_generate_hands_artifacts_to_writer(user_schema, roots):
    outcomes = RepositoryGenerator().generate(user_schema, ArtifactWriter(roots))
    assert [o.path for o in outcomes] == [roots.main / "com" / "example" / "repository" / "UserRepository.java"]
    assert outcomes[0].path.read_text(encoding="utf-8") == RepositoryGenerator().build(user_schema)[0].content


def test_base_service_impl_imports_lookup_types():
    account = Schema(
        package_name="com.example",
        entity_name="Account",
        id_fields=("id",),
        fields=(FieldDef("id", "Long"), FieldDef("email", "UUID")),
    )
    files = by_name(ServiceGenerator().build(account))
    for name in ("AccountService.java", "BaseAccountServiceImpl.java"):
        assert "import java.util.UUID;" in files[name].content
    assert "public boolean existsByEmail(UUID email)" in files["BaseAccountServiceImpl.java"].content
    parse(files["BaseAccountServiceImpl.java"])
