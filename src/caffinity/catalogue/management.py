"""Product management — commands and handler."""

from protean import handle
from protean.fields import Float, Identifier, String, Text
from protean.utils.globals import current_domain

from caffinity.catalogue.product import Product
from caffinity.domain import caffinity, logger


@caffinity.command(part_of="Product")
class AddProduct:
    name = String(required=True, max_length=100)
    description = Text()
    price = Float(required=True, min_value=0.01)
    category = String(required=True, max_length=20)
    product_type = String(max_length=50)


@caffinity.command(part_of="Product")
class UpdateProductDetails:
    product_id = Identifier(required=True)
    name = String(max_length=100)
    description = Text()
    price = Float(min_value=0.01)
    product_type = String(max_length=50)


@caffinity.command(part_of="Product")
class RemoveProduct:
    product_id = Identifier(required=True)


@caffinity.command_handler(part_of=Product)
class ManageProductHandler:
    @handle(AddProduct)
    def add_product(self, command):
        product = Product.add(
            name=command.name,
            price=command.price,
            category=command.category,
            description=command.description,
            product_type=command.product_type,
        )
        current_domain.repository_for(Product).add(product)
        logger.info("Product added", product_id=str(product.id), name=product.name)
        return str(product.id)

    @handle(UpdateProductDetails)
    def update_product_details(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.update_details(
            name=command.name,
            description=command.description,
            price=command.price,
            product_type=command.product_type,
        )
        repo.add(product)

    @handle(RemoveProduct)
    def remove_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        repo._dao.delete(product)
        logger.info("Product removed", product_id=str(command.product_id))
