# Operational scripts package init
